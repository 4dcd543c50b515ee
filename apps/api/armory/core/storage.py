"""
Local filesystem storage.

Defaults:
- STORAGE_ROOT: ./data            (characters.json, admin_key.txt)
- CATALOG_ROOT: ./data/definitions (items.xml, spells.xml, skills.xml)
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from .errors import StorageError
from .obs import emit

CHARACTERS_FILE = "characters.json"
ADMIN_KEY_FILE = "admin_key.txt"


def _repo_root() -> Path:
    # apps/api/armory/core/storage.py -> repo root = parents[4]
    return Path(__file__).resolve().parents[4]


def _resolve(raw: str) -> Path:
    p = Path(raw)
    return (_repo_root() / p).resolve() if not p.is_absolute() else p


def get_storage_root() -> Path:
    return _resolve(os.getenv("STORAGE_ROOT", "./data"))


def get_catalog_root() -> Path:
    return _resolve(os.getenv("CATALOG_ROOT", "./data/definitions"))


def ensure_storage_root() -> Path:
    root = get_storage_root()
    root.mkdir(parents=True, exist_ok=True)
    return root


def read_json_list(path: Path) -> List[Dict[str, Any]]:
    """Whole-file read. A missing file is an empty collection."""
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        emit("error", "storage.error", f"read failed: {path.name}", None, __name__, type=type(e).__name__)
        raise StorageError("could not read character data", {"type": type(e).__name__}) from e
    if not isinstance(data, list):
        emit("error", "storage.error", f"unexpected layout: {path.name}", None, __name__)
        raise StorageError("character data is not a list")
    return data


def write_json_list(path: Path, data: List[Dict[str, Any]]) -> None:
    """Whole-file rewrite through a sibling temp file + os.replace."""
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        emit("error", "storage.error", f"write failed: {path.name}", None, __name__, type=type(e).__name__)
        raise StorageError("could not write character data", {"type": type(e).__name__}) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def storage_health() -> Dict[str, Any]:
    try:
        root = ensure_storage_root()
        probe = root / ".probe_write"
        probe.write_text("ok", encoding="utf-8")
        probe.unlink()
        return {"status": "ok", "kind": "local_fs", "root": str(root.as_posix())}
    except OSError as e:
        return {"status": "error", "kind": "local_fs", "root": str(get_storage_root().as_posix()), "error": str(e)}
