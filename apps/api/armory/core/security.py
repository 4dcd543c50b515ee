"""
Secret hashing and the admin key.

The admin key is provisioned once per deployment: if admin_key.txt is absent a
new key is generated, only its bcrypt hash is written, and the plaintext is
shown to the operator exactly once. Afterwards callers can only ask
AdminKey.verify(); the material itself never leaves this module.
"""
from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Optional

import bcrypt

from .errors import StorageError
from .obs import emit, log
from .storage import ADMIN_KEY_FILE, ensure_storage_root

# no ambiguous characters (0 O 1 l I)
UPPERCASE = "ABCDEFGHJKLMNPQRSTUVWXYZ"
LOWERCASE = "abcdefghijkmnopqrstuvwxyz"
DIGITS = "23456789"
SYMBOLS = "#$@!%&*?"

MIN_ADMIN_KEY_LENGTH = 12
DEFAULT_ADMIN_KEY_LENGTH = 16
DEFAULT_BCRYPT_ROUNDS = 10


def _rounds() -> int:
    try:
        v = int(os.getenv("BCRYPT_ROUNDS", str(DEFAULT_BCRYPT_ROUNDS)))
    except ValueError:
        return DEFAULT_BCRYPT_ROUNDS
    # bcrypt accepts 4..31
    return min(max(v, 4), 31)


def _encode(secret: str) -> bytes:
    # bcrypt only reads the first 72 bytes; newer releases refuse longer input
    return secret.encode("utf-8")[:72]


def hash_secret(secret: str) -> str:
    return bcrypt.hashpw(_encode(secret), bcrypt.gensalt(rounds=_rounds())).decode("ascii")


def verify_secret(secret: str, hashed: Optional[str]) -> bool:
    if not secret or not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(secret), hashed.encode("ascii"))
    except ValueError:
        # not a bcrypt hash
        return False


def generate_admin_secret(length: int = DEFAULT_ADMIN_KEY_LENGTH) -> str:
    length = max(length, MIN_ADMIN_KEY_LENGTH)
    rng = secrets.SystemRandom()
    chars = [
        rng.choice(UPPERCASE),
        rng.choice(LOWERCASE),
        rng.choice(DIGITS),
        rng.choice(SYMBOLS),
    ]
    pool = UPPERCASE + LOWERCASE + DIGITS + SYMBOLS
    chars.extend(rng.choice(pool) for _ in range(length - len(chars)))
    rng.shuffle(chars)
    return "".join(chars)


class AdminKey:
    """Verify-only handle on the hashed admin secret."""

    def __init__(self, hashed: str) -> None:
        self._hashed = hashed

    def verify(self, secret: str) -> bool:
        return verify_secret(secret, self._hashed)

    def __repr__(self) -> str:
        return "AdminKey(<hidden>)"


def _admin_key_length() -> int:
    try:
        return int(os.getenv("ADMIN_KEY_LENGTH", str(DEFAULT_ADMIN_KEY_LENGTH)))
    except ValueError:
        return DEFAULT_ADMIN_KEY_LENGTH


def provision_admin_key(path: Optional[Path] = None) -> AdminKey:
    if path is None:
        path = ensure_storage_root() / ADMIN_KEY_FILE

    try:
        if path.exists():
            hashed = path.read_text(encoding="utf-8").strip()
            if hashed:
                return AdminKey(hashed)

        plaintext = generate_admin_secret(_admin_key_length())
        hashed = hash_secret(plaintext)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(hashed, encoding="utf-8")
    except OSError as e:
        emit("error", "storage.error", "admin key file unavailable", None, __name__, type=type(e).__name__)
        raise StorageError("could not provision admin key", {"type": type(e).__name__}) from e

    emit(
        "warning",
        "admin_key.generated",
        "New admin key generated. Save it now: it will not be shown again.",
        None,
        __name__,
        admin_key=plaintext,
        path=str(path.as_posix()),
    )
    log.warning("admin key generated at %s (shown once in the admin_key.generated event)", path)
    return AdminKey(hashed)


_admin_key: Optional[AdminKey] = None


def get_admin_key() -> AdminKey:
    global _admin_key
    if _admin_key is not None:
        return _admin_key
    _admin_key = provision_admin_key()
    return _admin_key


def reset_admin_key() -> None:
    global _admin_key
    _admin_key = None
