"""
Tests for equipment slot resolution against the fixture item catalog.
"""

import pytest

from armory.modules.characters.equipment import (
    SLOT_LAYOUT,
    SLOT_NAMES,
    SlotKind,
    classify,
    resolve_equipment,
)


def _ids(equipped):
    return {slot: (item["id"] if item else None) for slot, item in equipped.items()}


@pytest.fixture
def items(catalogs):
    return catalogs.items


class TestClassify:

    @pytest.mark.parametrize(
        "slot, expected",
        [
            ("ring", (SlotKind.RING, None)),
            ("Ring", (SlotKind.RING, None)),
            ("wrist", (SlotKind.WRIST, None)),
            ("primaryOrSecondary", (SlotKind.WEAPON, None)),
            ("primary", (SlotKind.PRIMARY, "Primary")),
            ("Secondary", (SlotKind.SECONDARY, "Secondary")),
            ("Head", (SlotKind.NAMED, "Head")),
            ("Back", (SlotKind.NAMED, "Back")),
        ],
    )
    def test_known_categories(self, slot, expected):
        assert classify(slot) == expected

    @pytest.mark.parametrize("slot", [None, "", "head", "Aura", "Ring 1", "Tail"])
    def test_unplaceable_categories(self, slot):
        assert classify(slot) is None


class TestResolveEquipment:

    def test_every_slot_is_reported(self, items):
        equipped = resolve_equipment({}, items)
        assert list(equipped) == list(SLOT_NAMES)
        assert all(v is None for v in equipped.values())

    def test_layout_covers_vocabulary_once(self):
        flat = [slot for row in SLOT_LAYOUT for slot in row]
        assert sorted(flat) == sorted(SLOT_NAMES)
        assert [len(row) for row in SLOT_LAYOUT] == [4, 5, 3, 5]

    def test_aura_and_charm_from_singleton_fields(self, items):
        equipped = resolve_equipment({"AuraItem": "601", "CharmItem": 602}, items)
        assert equipped["Aura"] == {"id": "601", "name": "Aura of Embers", "image": "embers.png"}
        assert equipped["Charm"]["id"] == "602"

    def test_unresolvable_singletons_stay_empty(self, items):
        equipped = resolve_equipment({"AuraItem": "999", "CharmItem": ""}, items)
        assert equipped["Aura"] is None
        assert equipped["Charm"] is None

    def test_ring_overflow_keeps_first_two(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["101", "102", "103"]}, items)
        assert equipped["Ring 1"]["id"] == "101"
        assert equipped["Ring 2"]["id"] == "102"
        assert "103" not in {v for v in _ids(equipped).values() if v}

    def test_ring_order_follows_equip_order(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["103", "101"]}, items)
        assert (equipped["Ring 1"]["id"], equipped["Ring 2"]["id"]) == ("103", "101")

    def test_wrist_overflow(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["203", "201", "202"]}, items)
        assert equipped["Wrist 1"]["id"] == "203"
        assert equipped["Wrist 2"]["id"] == "201"

    def test_explicit_primary_beats_generic_weapon(self, items):
        # [W1, P, W2]
        equipped = resolve_equipment({"CharacterEquip": ["311", "301", "312"]}, items)
        assert equipped["Primary"]["id"] == "301"
        assert equipped["Secondary"]["id"] == "311"
        assert "312" not in {v for v in _ids(equipped).values() if v}

    def test_explicit_secondary_leaves_primary_for_weapon(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["302", "311", "312"]}, items)
        assert equipped["Primary"]["id"] == "311"
        assert equipped["Secondary"]["id"] == "302"

    def test_weapons_fill_both_hands_first_come(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["313", "312", "311"]}, items)
        assert equipped["Primary"]["id"] == "313"
        assert equipped["Secondary"]["id"] == "312"

    def test_pass_through_slots(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["401", "501", "502"]}, items)
        assert equipped["Head"]["name"] == "Iron Helm"
        assert equipped["Feet"]["id"] == "501"
        assert equipped["Back"]["image"] == "cloak.png"

    def test_later_direct_item_wins(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["401", "403"]}, items)
        assert equipped["Head"]["id"] == "403"

    def test_pass_through_is_case_sensitive(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["402"]}, items)
        assert equipped["Head"] is None

    def test_unknown_and_slotless_items_are_ignored(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["999", "701", "401", None]}, items)
        assert _ids(equipped)["Head"] == "401"
        assert sum(1 for v in equipped.values() if v) == 1

    def test_integer_ids_resolve(self, items):
        equipped = resolve_equipment({"CharacterEquip": [101, 401]}, items)
        assert equipped["Ring 1"]["id"] == "101"
        assert equipped["Head"]["id"] == "401"

    def test_non_list_equip_is_treated_as_empty(self, items):
        equipped = resolve_equipment({"CharacterEquip": {"401": 1}}, items)
        assert all(v is None for v in equipped.values())

    def test_slotless_item_resolves_as_singleton(self, items):
        equipped = resolve_equipment({"AuraItem": "701", "CharacterEquip": ["701"]}, items)
        assert equipped["Aura"]["name"] == "Slotless Trinket"
        assert sum(1 for v in equipped.values() if v) == 1

    def test_aura_category_inside_equip_list_is_ignored(self, items):
        equipped = resolve_equipment({"CharacterEquip": ["601"], "AuraItem": None}, items)
        assert equipped["Aura"] is None
