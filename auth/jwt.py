"""
JWT-style token creation and verification.

Tokens are urlsafe-base64 JSON claims signed with HMAC-SHA256.
The secret and lifetime come from the ``Settings`` handed to
``TokenIssuer`` (env vars: ``JWT_SECRET``, ``JWT_EXPIRY_SECONDS``).
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from dataclasses import dataclass
from typing import Callable

from config.settings import Settings
from core.errors import InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str


class TokenIssuer:
    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = settings.jwt_secret.encode()
        self._expiry_seconds = settings.jwt_expiry_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: int, email: str) -> str:
        """Create a signed token with ``sub`` = user id, ``email`` and expiry."""
        now = int(self._clock())
        payload = {
            "sub": user_id,
            "email": email,
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify token and return its claims.

        Raises ``InvalidTokenError`` on malformed, tampered or expired tokens.
        """
        parts = token.split(".", 1)
        if len(parts) != 2:
            raise InvalidTokenError("bad format")
        try:
            raw = urlsafe_b64decode(parts[0].encode())
        except (binascii.Error, ValueError):
            raise InvalidTokenError("bad format")
        if not hmac.compare_digest(parts[1].encode(), self._sign(raw).encode()):
            raise InvalidTokenError("bad signature")
        try:
            payload = json.loads(raw)
            claims = TokenClaims(user_id=int(payload["sub"]), email=str(payload["email"]))
            expires_at = float(payload["exp"])
        except (ValueError, KeyError, TypeError):
            raise InvalidTokenError("malformed payload")
        if expires_at <= self._clock():
            raise InvalidTokenError("token expired")
        return claims
