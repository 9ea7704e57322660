"""
TechNotes Backend - Password Service Tests
============================================

What:  bcrypt hashing uses the configured cost factor and verifies correctly.
"""

import pytest

from technotes.services.password_service import PasswordService


class TestPasswordService:

    def setup_method(self):
        self.service = PasswordService(rounds=4)

    def test_hash_uses_cost_factor(self):
        hashed = self.service.hash_sync("s3cret")

        assert hashed.startswith("$2b$04$")
        assert "s3cret" not in hashed

    def test_hashes_are_salted(self):
        assert self.service.hash_sync("s3cret") != self.service.hash_sync("s3cret")

    @pytest.mark.asyncio
    async def test_async_hash_and_verify(self):
        hashed = await self.service.hash("s3cret")

        assert await self.service.verify("s3cret", hashed)
        assert not await self.service.verify("wrong", hashed)
