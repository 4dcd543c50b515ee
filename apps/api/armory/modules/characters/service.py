"""
Character record repository backed by a single JSON file.

Every write reads the whole collection, mutates it in memory and rewrites it
in full. There is no lock across the read and the write: two concurrent
writers can lose an update (last write wins).
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from armory.core.errors import AuthorizationError, NotFoundError
from armory.core.obs import emit
from armory.core.security import AdminKey, get_admin_key, hash_secret, verify_secret
from armory.core.storage import CHARACTERS_FILE, ensure_storage_root, read_json_list, write_json_list

HASH_FIELD = "hashedKey"


def _public(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if k != HASH_FIELD}


def _next_index(records: List[Dict[str, Any]]) -> int:
    indices = [int(r["index"]) for r in records if isinstance(r.get("index"), int)]
    return max(indices) + 1 if indices else 1


class CharacterRepository:
    def __init__(self, data_file: Path, admin_key: AdminKey) -> None:
        self.data_file = data_file
        self._admin_key = admin_key

    def _load(self) -> List[Dict[str, Any]]:
        return read_json_list(self.data_file)

    def _save(self, records: List[Dict[str, Any]]) -> None:
        write_json_list(self.data_file, records)

    def upsert(self, candidate: Dict[str, Any], secret: str) -> Tuple[Dict[str, Any], bool]:
        """
        Create or replace by ownership.

        Same CharName + a secret that verifies against the stored hash
        replaces that record in place (same index). Anything else appends a
        new record with index max+1.
        """
        records = self._load()
        name = candidate["CharName"]

        pos: Optional[int] = None
        for i, r in enumerate(records):
            if r.get("CharName") == name and verify_secret(secret, r.get(HASH_FIELD)):
                pos = i
                break

        record: Dict[str, Any] = {
            "index": None,
            HASH_FIELD: hash_secret(secret),
            "CharName": name,
            "CharClass": candidate.get("CharClass"),
            "CharLevel": candidate.get("CharLevel"),
            "DiscordId": candidate.get("DiscordId") or "",
        }
        for k, v in candidate.items():
            if k not in record:
                record[k] = v

        was_update = pos is not None
        if was_update:
            record["index"] = records[pos]["index"]
            records[pos] = record
        else:
            record["index"] = _next_index(records)
            records.append(record)

        self._save(records)
        emit(
            "info",
            "character.upserted",
            f"character {'updated' if was_update else 'added'}",
            None,
            __name__,
            index=record["index"],
            char_name=name,
            updated=was_update,
        )
        return _public(record), was_update

    def list_summaries(self, query: Optional[str] = None) -> List[Dict[str, Any]]:
        term = (query or "").strip().lower()
        out: List[Dict[str, Any]] = []
        for r in self._load():
            name = r.get("CharName") or ""
            if term and term not in name.lower():
                continue
            out.append(
                {
                    "index": r.get("index"),
                    "CharName": name,
                    "CharClass": r.get("CharClass"),
                    "CharLevel": r.get("CharLevel"),
                    "DiscordId": r.get("DiscordId") or "",
                }
            )
        return out

    def get_by_index(self, index: int) -> Dict[str, Any]:
        for r in self._load():
            if r.get("index") == index:
                return _public(r)
        raise NotFoundError("Character not found", {"index": index})

    def delete_by_authorization(self, char_name: str, secret: str) -> Dict[str, Any]:
        """
        Delete the record named char_name when secret is its owner's or the
        admin key. With several same-named records the owner's own record is
        chosen; an admin delete takes the first in storage order.
        """
        records = self._load()
        named = [i for i, r in enumerate(records) if r.get("CharName") == char_name]
        if not named:
            raise NotFoundError("Character not found", {"characterName": char_name})

        pos: Optional[int] = None
        for i in named:
            if verify_secret(secret, records[i].get(HASH_FIELD)):
                pos = i
                break
        by_admin = False
        if pos is None and self._admin_key.verify(secret):
            pos = named[0]
            by_admin = True
        if pos is None:
            raise AuthorizationError("Invalid key")

        removed = records.pop(pos)
        self._save(records)
        emit(
            "info",
            "character.deleted",
            "character deleted",
            None,
            __name__,
            index=removed.get("index"),
            char_name=char_name,
            by_admin=by_admin,
        )
        return _public(removed)


_repository: Optional[CharacterRepository] = None


def get_repository() -> CharacterRepository:
    global _repository
    if _repository is not None:
        return _repository
    _repository = CharacterRepository(ensure_storage_root() / CHARACTERS_FILE, get_admin_key())
    return _repository


def reset_repository() -> None:
    global _repository
    _repository = None
