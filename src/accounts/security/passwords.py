"""
Password hashing strategies.

Services receive a `PasswordHasher` at construction time; production wires
`BcryptPasswordHasher(settings.BCRYPT_ROUNDS)` and tests pass a low cost
factor to keep the suite fast.
"""

import asyncio
import logging
from typing import Protocol

import bcrypt

from ..exceptions import ErrorKind, errorf

logger = logging.getLogger(__name__)


class PasswordHasher(Protocol):
    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, hashed: str) -> bool: ...


class BcryptPasswordHasher:
    """
    bcrypt with a configurable cost factor.

    bcrypt only looks at the first 72 bytes of the password and rejects longer
    input, so anything the library refuses surfaces as an INTERNAL error.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        try:
            digest = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        except ValueError as exc:
            raise errorf(ErrorKind.INTERNAL, "Error hashing password: %s", exc) from exc
        return digest.decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            logger.warning("security.password.malformed_hash")
            return False


async def hash_password(hasher: PasswordHasher, plain: str) -> str:
    """Run the (CPU bound) hash in a worker thread."""
    return await asyncio.to_thread(hasher.hash, plain)
