"""Unit tests for bcrypt password hashing."""

import pytest

from bookshelf.auth.passwords import hash_password, verify_password


@pytest.mark.unit
class TestPasswords:
    @pytest.mark.asyncio
    async def test_hash_is_not_plaintext(self):
        password_hash = await hash_password("sekret", rounds=4)

        assert password_hash != "sekret"
        assert password_hash.startswith("$2b$04$")

    @pytest.mark.asyncio
    async def test_hash_is_salted(self):
        assert await hash_password("sekret", rounds=4) != await hash_password("sekret", rounds=4)

    @pytest.mark.asyncio
    async def test_verify_correct_password(self):
        password_hash = await hash_password("sekret", rounds=4)

        assert await verify_password("sekret", password_hash) is True

    @pytest.mark.asyncio
    async def test_verify_wrong_password(self):
        password_hash = await hash_password("sekret", rounds=4)

        assert await verify_password("guess", password_hash) is False

    @pytest.mark.asyncio
    async def test_verify_against_non_bcrypt_value(self):
        assert await verify_password("sekret", "plain-text-not-a-hash") is False

    @pytest.mark.asyncio
    async def test_default_rounds_come_from_settings(self, monkeypatch):
        from bookshelf.config import settings

        monkeypatch.setattr(settings, "bcrypt_rounds", 5)

        assert (await hash_password("sekret")).startswith("$2b$05$")
