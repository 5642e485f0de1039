"""
Tests for token issuance/verification and the access gate.
"""

import pytest

from auth.dependencies import AccessGate
from auth.jwt import TokenIssuer
from config.settings import Settings
from core.errors import InvalidTokenError, UnauthorizedError


def _flip_last_char(token: str) -> str:
    return token[:-1] + ("0" if token[-1] != "0" else "1")


class TestTokenIssuer:
    def test_round_trip_yields_subject_and_email(self, tokens):
        token = tokens.issue(42, "alice@example.com")
        claims = tokens.verify(token)
        assert claims.user_id == 42
        assert claims.email == "alice@example.com"

    def test_flipped_signature_byte_fails(self, tokens):
        token = tokens.issue(1, "a@example.com")
        with pytest.raises(InvalidTokenError, match="bad signature"):
            tokens.verify(_flip_last_char(token))

    def test_tampered_payload_fails(self, tokens):
        token = tokens.issue(1, "a@example.com")
        other = tokens.issue(2, "b@example.com")
        forged = other.split(".")[0] + "." + token.split(".")[1]
        with pytest.raises(InvalidTokenError):
            tokens.verify(forged)

    def test_expired_token_fails(self, settings):
        now = [1_000_000.0]
        issuer = TokenIssuer(settings, clock=lambda: now[0])
        token = issuer.issue(7, "late@example.com")

        now[0] += settings.jwt_expiry_seconds - 1
        assert issuer.verify(token).user_id == 7

        now[0] += 1
        with pytest.raises(InvalidTokenError, match="expired"):
            issuer.verify(token)

    def test_default_lifetime_is_one_day(self):
        assert Settings().jwt_expiry_seconds == 86400

    def test_other_secret_rejects_token(self, tokens):
        token = tokens.issue(3, "c@example.com")
        stranger = TokenIssuer(Settings(jwt_secret="someone-else"))
        with pytest.raises(InvalidTokenError, match="bad signature"):
            stranger.verify(token)

    @pytest.mark.parametrize("garbage", ["", "no-dot-here", "!!!.abc", "e30.deadbeef"])
    def test_malformed_tokens_fail(self, tokens, garbage):
        with pytest.raises(InvalidTokenError):
            tokens.verify(garbage)


class TestAccessGate:
    def test_resolves_caller_identity(self, tokens):
        gate = AccessGate(tokens)
        caller = gate.resolve(tokens.issue(5, "e@example.com"))
        assert caller.user_id == 5

    def test_missing_token_is_unauthorized(self, tokens):
        with pytest.raises(UnauthorizedError, match="missing"):
            AccessGate(tokens).resolve(None)

    def test_invalid_token_is_unauthorized(self, tokens):
        token = _flip_last_char(tokens.issue(5, "e@example.com"))
        with pytest.raises(UnauthorizedError, match="invalid or expired"):
            AccessGate(tokens).resolve(token)
