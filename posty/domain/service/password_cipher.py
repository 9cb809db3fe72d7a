"""Password hashing domain service.

bcrypt truncates inputs at 72 bytes; passwords are pre-hashed with SHA-256
(base64 encoded) so long passwords are compared in full.

bcrypt is deliberately slow, so both operations run in a worker thread
and keep the event loop free for other requests.
"""

import asyncio
import base64
import hashlib

import bcrypt
import logfire

from posty.domain.error import CipherError

from .base import Service


def _prehash(plaintext: str) -> bytes:
    return base64.b64encode(hashlib.sha256(plaintext.encode("utf-8")).digest())


def _hash_sync(plaintext: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_prehash(plaintext), salt).decode("utf-8")


def _verify_sync(plaintext: str, digest: str) -> bool:
    return bool(bcrypt.checkpw(_prehash(plaintext), digest.encode("utf-8")))


class PasswordCipher(Service):
    """One-way salted password hashing with constant-time verification."""

    def __init__(self, rounds: int = 12) -> None:
        """Initialize password cipher.

        Args:
            rounds: bcrypt work factor
        """
        self.rounds = rounds

    async def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh random salt.

        Args:
            plaintext: Password to hash

        Returns:
            bcrypt digest with the salt embedded, safe to store

        Raises:
            CipherError: If bcrypt fails
        """
        try:
            return await asyncio.to_thread(_hash_sync, plaintext, self.rounds)
        except (ValueError, TypeError) as e:
            logfire.error("Password hashing failed", error=str(e))
            raise CipherError("Password hashing failed") from e

    async def verify(self, plaintext: str, digest: str | None) -> bool:
        """Check a password against a stored digest.

        Returns False for any mismatch, including an empty or malformed
        digest. Never raises.
        """
        if not digest:
            return False
        try:
            return await asyncio.to_thread(_verify_sync, plaintext, digest)
        except (ValueError, TypeError):
            return False
