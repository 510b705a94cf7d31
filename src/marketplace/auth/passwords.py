"""
marketplace.auth.passwords

One-way credential hashing with bcrypt.

Responsibilities:
- Hash plaintext passwords with a per-call random salt (embedded in the digest).
- Verify plaintext against a stored digest without raising on mismatch.
- Provide a dummy verification so unknown-user logins cost the same as real ones.

bcrypt is CPU-bound, so both operations run in a worker thread and are awaited
like any other I/O call.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib

import bcrypt

from marketplace.errors import HashingError


def _prehash(plaintext: str) -> bytes:
    # bcrypt only reads 72 bytes (and bcrypt>=5 rejects longer input); a fixed
    # 44-byte SHA-256 digest keeps every password fully significant.
    return base64.b64encode(hashlib.sha256(plaintext.encode("utf-8")).digest())


class PasswordHasher:
    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds
        # Computed once so the first unknown-user login is not measurably slower.
        self._dummy_digest = self._hash_sync("marketplace-timing-dummy")

    def _hash_sync(self, plaintext: str) -> str:
        try:
            return bcrypt.hashpw(_prehash(plaintext), bcrypt.gensalt(rounds=self._rounds)).decode(
                "ascii"
            )
        except Exception as e:
            raise HashingError() from e

    @staticmethod
    def _verify_sync(plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(_prehash(plaintext), digest.encode("ascii"))
        except ValueError:
            # Malformed or non-bcrypt digest: treat as a mismatch.
            return False

    async def hash(self, plaintext: str) -> str:
        return await asyncio.to_thread(self._hash_sync, plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        """
        Return True when `plaintext` matches `digest`.

        bcrypt.checkpw compares in constant time, so the position of the first
        differing byte does not affect timing.
        """

        return await asyncio.to_thread(self._verify_sync, plaintext, digest)

    async def verify_dummy(self, plaintext: str) -> None:
        await asyncio.to_thread(self._verify_sync, plaintext, self._dummy_digest)


# --- Module Notes -----------------------------------------------------------
# Digests are never logged or returned past `db.repositories.users`.
