"""
Definition catalogs (items, spells, skills) loaded from XML once at startup.

items.xml:   <Item><id/><Slot/><Name/><Image/></Item>
spells.xml:  <Spell><id/><name/><image/></Spell>
skills.xml:  <Skill><id/><name/><image/></Skill>

Catalogs are read-only after loading; re-population requires a restart.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from armory.core.errors import StorageError
from armory.core.obs import emit, log
from armory.core.storage import get_catalog_root

from .schemas import Definition, ItemDefinition, SkillDefinition, SpellDefinition

ITEMS_FILE = "items.xml"
SPELLS_FILE = "spells.xml"
SKILLS_FILE = "skills.xml"


def _text(el: ET.Element, tag: str) -> Optional[str]:
    child = el.find(tag)
    if child is None or child.text is None:
        return None
    v = child.text.strip()
    return v or None


def _parse(path: Path) -> Optional[ET.Element]:
    if not path.exists():
        log.warning("catalog file missing: %s (using empty catalog)", path)
        return None
    try:
        return ET.parse(str(path)).getroot()
    except (ET.ParseError, OSError) as e:
        emit("error", "storage.error", f"catalog unreadable: {path.name}", None, __name__, type=type(e).__name__)
        raise StorageError(f"could not load catalog {path.name}", {"type": type(e).__name__}) from e


def load_item_catalog(path: Path) -> Dict[str, ItemDefinition]:
    root = _parse(path)
    out: Dict[str, ItemDefinition] = {}
    if root is None:
        return out
    for el in root.iter("Item"):
        item_id = _text(el, "id")
        if not item_id:
            continue
        out[item_id] = ItemDefinition(
            id=item_id,
            slot=_text(el, "Slot"),
            name=_text(el, "Name"),
            image=_text(el, "Image"),
        )
    return out


def load_definition_catalog(path: Path, tag: str, model: type = Definition) -> Dict[str, Definition]:
    root = _parse(path)
    out: Dict[str, Definition] = {}
    if root is None:
        return out
    for el in root.iter(tag):
        def_id = _text(el, "id")
        if not def_id:
            continue
        out[def_id] = model(id=def_id, name=_text(el, "name"), image=_text(el, "image"))
    return out


class Catalogs:
    def __init__(
        self,
        items: Optional[Dict[str, ItemDefinition]] = None,
        spells: Optional[Dict[str, Definition]] = None,
        skills: Optional[Dict[str, Definition]] = None,
    ) -> None:
        self.items: Mapping[str, ItemDefinition] = MappingProxyType(dict(items or {}))
        self.spells: Mapping[str, Definition] = MappingProxyType(dict(spells or {}))
        self.skills: Mapping[str, Definition] = MappingProxyType(dict(skills or {}))

    def by_kind(self, kind: str) -> Mapping[str, Definition]:
        if kind == "items":
            return self.items
        if kind == "spells":
            return self.spells
        if kind == "skills":
            return self.skills
        raise KeyError(kind)

    def counts(self) -> Dict[str, int]:
        return {"items": len(self.items), "spells": len(self.spells), "skills": len(self.skills)}


def load_catalogs(root: Optional[Path] = None) -> Catalogs:
    root = root or get_catalog_root()
    catalogs = Catalogs(
        items=load_item_catalog(root / ITEMS_FILE),
        spells=load_definition_catalog(root / SPELLS_FILE, "Spell", SpellDefinition),
        skills=load_definition_catalog(root / SKILLS_FILE, "Skill", SkillDefinition),
    )
    emit("info", "catalog.loaded", "definition catalogs loaded", None, __name__, root=str(root.as_posix()), **catalogs.counts())
    return catalogs


_catalogs: Optional[Catalogs] = None


def get_catalogs() -> Catalogs:
    global _catalogs
    if _catalogs is not None:
        return _catalogs
    _catalogs = load_catalogs()
    return _catalogs


def reset_catalogs() -> None:
    global _catalogs
    _catalogs = None
