"""
Tests for password hashing and the Authenticator (signup / signin).
"""

import pytest
from unittest.mock import patch

from core.errors import ConflictError, UnauthorizedError
from utils.schemas import SignupRequest


class TestPasswordHasher:
    def test_hash_verifies_and_differs_from_plaintext(self, hasher):
        hashed = hasher.hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert hasher.verify("s3cret-pass", hashed)
        assert not hasher.verify("wrong-pass", hashed)

    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("same-password") != hasher.hash("same-password")

    def test_malformed_hash_does_not_verify(self, hasher):
        assert hasher.verify("anything", "not-a-bcrypt-hash") is False


class TestSignup:
    @pytest.mark.asyncio
    async def test_created_user_hash_verifies(self, make_user, hasher):
        user = await make_user("alice", password="password123")
        assert user.id is not None
        assert user.password_hash != "password123"
        assert hasher.verify("password123", user.password_hash)

    @pytest.mark.asyncio
    async def test_blank_optional_fields_stored_as_none(self, authenticator):
        user = await authenticator.signup(
            SignupRequest(username="bob", email="bob@example.com", password="password123")
        )
        assert user.about is None
        assert user.avatar is None

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts_on_username(self, make_user, authenticator):
        await make_user("carol")
        with pytest.raises(ConflictError, match="username already exists"):
            await authenticator.signup(
                SignupRequest(username="carol", email="other@example.com", password="password123")
            )

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts_on_email(self, make_user, authenticator):
        await make_user("dave")
        with pytest.raises(ConflictError, match="email already exists"):
            await authenticator.signup(
                SignupRequest(username="dave2", email="dave@example.com", password="password123")
            )

    @pytest.mark.asyncio
    async def test_availability_checked_once_per_signup(self, authenticator, directory):
        with patch.object(directory, "ensure_available", wraps=directory.ensure_available) as check:
            await authenticator.signup(
                SignupRequest(username="frank", email="frank@example.com", password="password123")
            )
        check.assert_awaited_once_with("frank", "frank@example.com")

    @pytest.mark.asyncio
    async def test_username_conflict_reported_first(self, make_user, authenticator):
        await make_user("erin")
        with pytest.raises(ConflictError, match="username"):
            await authenticator.signup(
                SignupRequest(username="erin", email="erin@example.com", password="password123")
            )


class TestSignin:
    @pytest.mark.asyncio
    async def test_validate_credentials(self, make_user, authenticator):
        user = await make_user("frank", password="password123")
        assert (await authenticator.validate_credentials("frank@example.com", "password123")).id == user.id
        assert await authenticator.validate_credentials("frank@example.com", "nope-nope") is None
        assert await authenticator.validate_credentials("ghost@example.com", "password123") is None

    @pytest.mark.asyncio
    async def test_signin_token_resolves_to_user(self, make_user, authenticator, tokens):
        user = await make_user("grace", password="password123")
        token = await authenticator.signin("grace@example.com", "password123")
        claims = tokens.verify(token.access_token)
        assert claims.user_id == user.id
        assert claims.email == "grace@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, make_user, authenticator):
        await make_user("heidi", password="password123")
        with pytest.raises(UnauthorizedError) as wrong_password:
            await authenticator.signin("heidi@example.com", "bad-password")
        with pytest.raises(UnauthorizedError) as unknown_email:
            await authenticator.signin("nobody@example.com", "password123")
        assert str(wrong_password.value) == str(unknown_email.value) == "invalid credentials"
