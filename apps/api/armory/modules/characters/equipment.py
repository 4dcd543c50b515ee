"""
Equipment slot resolution.

A save file lists every worn item in one flat CharacterEquip list (plus the
AuraItem and CharmItem singletons). That list mixes a two-ring layout, a
two-wrist layout and a primary/secondary weapon pair sharing two slots, so the
visual layout is rebuilt here in two phases:

1. direct placement: aura, charm, explicit primary/secondary, and every
   single-occupant slot (Head, Neck, ...), later items overwriting earlier;
2. overflow fill: rings -> Ring 1/2, wrists -> Wrist 1/2, then generic
   weapons into whichever of Primary/Secondary is still empty.

Extra rings, wrists and weapons are discarded. Items missing from the catalog
or without a slot are ignored.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from armory.modules.catalogs.schemas import ItemDefinition

SLOT_NAMES: Tuple[str, ...] = (
    "Aura",
    "Charm",
    "Head",
    "Neck",
    "Ring 1",
    "Ring 2",
    "Hands",
    "Torso",
    "Shoulders",
    "Wrist 1",
    "Wrist 2",
    "Legs",
    "Primary",
    "Secondary",
    "Waist",
    "Feet",
    "Back",
)

# visual grid, 4-5-3-5
SLOT_LAYOUT: Tuple[Tuple[str, ...], ...] = (
    ("Aura", "Charm", "Head", "Neck"),
    ("Ring 1", "Hands", "Torso", "Shoulders", "Ring 2"),
    ("Wrist 1", "Legs", "Wrist 2"),
    ("Primary", "Waist", "Feet", "Back", "Secondary"),
)

PASS_THROUGH_SLOTS = frozenset(("Head", "Neck", "Hands", "Torso", "Shoulders", "Legs", "Waist", "Feet", "Back"))


class SlotKind(str, Enum):
    RING = "ring"
    WRIST = "wrist"
    WEAPON = "primaryorsecondary"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    NAMED = "named"


_DIRECT_TARGET = {SlotKind.PRIMARY: "Primary", SlotKind.SECONDARY: "Secondary"}


def classify(slot: Optional[str]) -> Optional[Tuple[SlotKind, Optional[str]]]:
    """Map an item's slot category to (kind, target slot name or None)."""
    if not slot:
        return None
    lowered = slot.lower()
    if lowered in (SlotKind.RING.value, SlotKind.WRIST.value, SlotKind.WEAPON.value):
        return SlotKind(lowered), None
    if lowered in (SlotKind.PRIMARY.value, SlotKind.SECONDARY.value):
        kind = SlotKind(lowered)
        return kind, _DIRECT_TARGET[kind]
    # case-sensitive: "head" is not "Head"
    if slot in PASS_THROUGH_SLOTS:
        return SlotKind.NAMED, slot
    return None


def _as_list(v: Any) -> List[Any]:
    if isinstance(v, (list, tuple)):
        return list(v)
    return []


def display_item(item_id: Any, items: Mapping[str, ItemDefinition]) -> Optional[Dict[str, Any]]:
    if item_id is None or item_id == "":
        return None
    definition = items.get(str(item_id))
    if definition is None:
        return None
    return {"id": str(item_id), "name": definition.name, "image": definition.image}


def resolve_equipment(record: Mapping[str, Any], items: Mapping[str, ItemDefinition]) -> Dict[str, Optional[Dict[str, Any]]]:
    equipped: Dict[str, Optional[Dict[str, Any]]] = {name: None for name in SLOT_NAMES}

    equipped["Aura"] = display_item(record.get("AuraItem"), items)
    equipped["Charm"] = display_item(record.get("CharmItem"), items)

    rings: List[Dict[str, Any]] = []
    wrists: List[Dict[str, Any]] = []
    weapons: List[Dict[str, Any]] = []

    for item_id in _as_list(record.get("CharacterEquip")):
        entry = display_item(item_id, items)
        if entry is None:
            continue
        placed = classify(items[str(item_id)].slot)
        if placed is None:
            continue
        kind, target = placed
        if kind is SlotKind.RING:
            rings.append(entry)
        elif kind is SlotKind.WRIST:
            wrists.append(entry)
        elif kind is SlotKind.WEAPON:
            weapons.append(entry)
        else:
            equipped[target] = entry

    for i, item in enumerate(rings[:2]):
        equipped[f"Ring {i + 1}"] = item
    for i, item in enumerate(wrists[:2]):
        equipped[f"Wrist {i + 1}"] = item

    for weapon in weapons:
        if equipped["Primary"] is None:
            equipped["Primary"] = weapon
        elif equipped["Secondary"] is None:
            equipped["Secondary"] = weapon

    return equipped
