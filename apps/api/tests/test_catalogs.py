import pytest

from armory.core.errors import StorageError
from armory.modules.catalogs.service import (
    get_catalogs,
    load_catalogs,
    load_definition_catalog,
    load_item_catalog,
)

from conftest import FIXTURES


class TestItemCatalog:

    def test_loads_items_with_slots(self):
        items = load_item_catalog(FIXTURES / "items.xml")
        ring = items["101"]
        assert (ring.slot, ring.name, ring.image) == ("ring", "Copper Band", "copper_band.png")

    def test_item_without_slot_is_kept_without_slot(self):
        items = load_item_catalog(FIXTURES / "items.xml")
        assert items["701"].slot is None

    def test_item_without_id_is_skipped(self):
        items = load_item_catalog(FIXTURES / "items.xml")
        assert all(d.name != "No Id Amulet" for d in items.values())

    def test_missing_file_is_empty(self, tmp_path):
        assert load_item_catalog(tmp_path / "nope.xml") == {}

    def test_malformed_file_raises(self, tmp_path):
        bad = tmp_path / "items.xml"
        bad.write_text("<Items><Item>", encoding="utf-8")
        with pytest.raises(StorageError):
            load_item_catalog(bad)


class TestDefinitionCatalogs:

    def test_spells_and_skills(self):
        spells = load_definition_catalog(FIXTURES / "spells.xml", "Spell")
        skills = load_definition_catalog(FIXTURES / "skills.xml", "Skill")
        assert spells["fireball"].name == "Fireball"
        assert skills["2"].image is None

    def test_load_catalogs_counts(self):
        catalogs = load_catalogs(FIXTURES)
        assert catalogs.counts() == {"items": 19, "spells": 2, "skills": 2}

    def test_catalogs_are_read_only(self):
        catalogs = load_catalogs(FIXTURES)
        with pytest.raises(TypeError):
            catalogs.items["new"] = catalogs.items["101"]

    def test_get_catalogs_is_cached(self):
        # CATALOG_ROOT points at the fixtures (see conftest)
        assert get_catalogs() is get_catalogs()
        assert "fireball" in get_catalogs().spells
