"""
Ingestion validation for uploaded save files.

Only the allow-listed save fields survive; anything else in the payload is
dropped before it can reach the repository.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from armory.core.errors import ValidationError

DEFAULT_MAX_UPLOAD_BYTES = 2 * 1024 * 1024

SAVE_FIELDS = (
    "CharName",
    "CharClass",
    "CharLevel",
    "CharacterInv",
    "CharacterEquip",
    "EquipSlotQuantities",
    "CharacterSpells",
    "CharacterSkills",
    "TutorialsDone",
    "CurHP",
    "CurMana",
    "CurrentXP",
    "Gold",
    "CompletedQuests",
    "ActiveQuests",
    "Keyring",
    "AuraItem",
    "CharmItem",
    "CharmQual",
)


def max_upload_bytes() -> int:
    try:
        v = int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))
    except ValueError:
        return DEFAULT_MAX_UPLOAD_BYTES
    return v if v > 0 else DEFAULT_MAX_UPLOAD_BYTES


def _reject_constant(token: str) -> Any:
    # NaN, Infinity, -Infinity are not JSON
    raise ValueError(f"non-standard JSON constant: {token}")


def validate_upload(raw: bytes, declared_size: Optional[int] = None) -> Dict[str, Any]:
    limit = max_upload_bytes()
    if (declared_size is not None and declared_size > limit) or len(raw) > limit:
        raise ValidationError("File too large", {"max_bytes": limit})

    try:
        payload = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError):
        raise ValidationError("Invalid JSON in file")

    if not isinstance(payload, dict):
        raise ValidationError("Invalid save file: expected a JSON object")

    name = payload.get("CharName")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Invalid save file: Missing or invalid CharName")

    return {k: payload[k] for k in SAVE_FIELDS if k in payload}
