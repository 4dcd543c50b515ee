from __future__ import annotations

from typing import Any, Dict, List, Mapping

from armory.modules.catalogs.schemas import Definition
from armory.modules.catalogs.service import Catalogs

from .equipment import SLOT_LAYOUT, resolve_equipment


def _entries(ids: Any, defs: Mapping[str, Definition]) -> List[Dict[str, Any]]:
    # unknown ids still render, labelled by their raw id
    if not isinstance(ids, (list, tuple)):
        return []
    out: List[Dict[str, Any]] = []
    for raw in ids:
        key = str(raw)
        d = defs.get(key)
        out.append({"id": key, "name": (d.name if d and d.name else key), "image": d.image if d else None})
    return out


def _labels(v: Any) -> List[Any]:
    return list(v) if isinstance(v, (list, tuple)) else []


def build_sheet(record: Mapping[str, Any], catalogs: Catalogs) -> Dict[str, Any]:
    """Everything the detail view shows for one character, resolved against the catalogs."""
    return {
        "character": dict(record),
        "equipment": resolve_equipment(record, catalogs.items),
        "layout": [list(row) for row in SLOT_LAYOUT],
        "spells": _entries(record.get("CharacterSpells"), catalogs.spells),
        "skills": _entries(record.get("CharacterSkills"), catalogs.skills),
        "completed_quests": _labels(record.get("CompletedQuests")),
        "active_quests": _labels(record.get("ActiveQuests")),
    }
