"""
TechNotes Backend - Password Hashing
======================================

What:  One-way bcrypt hashing for user passwords via passlib's CryptContext.
How:   The cost factor comes from settings.password_hash_rounds (default 10).
       bcrypt is CPU bound (~50-100ms at 10 rounds), so the async wrappers run
       it in Starlette's threadpool instead of on the event loop.
"""

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from technotes.config import settings


class PasswordService:
    """Hashes and verifies passwords with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = settings.password_hash_rounds):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash_sync(self, password: str) -> str:
        return self._context.hash(password)

    def verify_sync(self, password: str, hashed: str) -> bool:
        return self._context.verify(password, hashed)

    async def hash(self, password: str) -> str:
        """Hash a plain-text password off the event loop."""
        return await run_in_threadpool(self.hash_sync, password)

    async def verify(self, password: str, hashed: str) -> bool:
        """Check a plain-text password against a stored hash."""
        return await run_in_threadpool(self.verify_sync, password, hashed)


password_service = PasswordService()
