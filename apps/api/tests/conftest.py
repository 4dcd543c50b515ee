"""
Shared pytest fixtures.

Every test gets its own STORAGE_ROOT under tmp_path, the XML catalogs from
tests/fixtures, a cheap bcrypt cost, and freshly reset process singletons.
"""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from armory.core import security
from armory.core.security import AdminKey, hash_secret
from armory.modules.catalogs import service as catalogs_service
from armory.modules.catalogs.service import load_catalogs
from armory.modules.characters import service as characters_service
from armory.modules.characters.service import CharacterRepository

FIXTURES = Path(__file__).parent / "fixtures"
ADMIN_SECRET = "Adm1n#Secret$Key"


def _reset_singletons():
    security.reset_admin_key()
    characters_service.reset_repository()
    catalogs_service.reset_catalogs()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    storage = tmp_path / "data"
    monkeypatch.setenv("STORAGE_ROOT", str(storage))
    monkeypatch.setenv("CATALOG_ROOT", str(FIXTURES))
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    _reset_singletons()
    yield storage
    _reset_singletons()


@pytest.fixture
def admin_key():
    return AdminKey(hash_secret(ADMIN_SECRET))


@pytest.fixture
def repo(tmp_path, admin_key):
    return CharacterRepository(tmp_path / "characters.json", admin_key)


@pytest.fixture
def catalogs():
    return load_catalogs(FIXTURES)


@pytest.fixture
def client(isolated_env):
    # pre-provision a known admin key so no random one is generated
    isolated_env.mkdir(parents=True, exist_ok=True)
    (isolated_env / "admin_key.txt").write_text(hash_secret(ADMIN_SECRET), encoding="utf-8")

    from armory.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_save():
    """Build save-file bytes the way the game client writes them."""

    def _make(name="Aldric", **fields):
        payload = {"CharName": name, "CharClass": "Warrior", "CharLevel": 7}
        payload.update(fields)
        return json.dumps(payload).encode("utf-8")

    return _make
