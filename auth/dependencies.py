"""
Access gate for protected routes.

``AccessGate`` turns a bearer token into the caller's identity;
``get_current_user_id`` is the FastAPI dependency every protected route
uses.  Nothing is stored between requests; the token is the session.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_token_issuer
from auth.jwt import TokenClaims, TokenIssuer
from core.errors import InvalidTokenError, UnauthorizedError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


class AccessGate:
    def __init__(self, tokens: TokenIssuer) -> None:
        self.tokens = tokens

    def resolve(self, token: Optional[str]) -> TokenClaims:
        """
        Verify ``token`` and return the caller's identity.

        Raises ``UnauthorizedError`` when the token is missing, tampered
        with, malformed or expired.
        """
        if not token:
            raise UnauthorizedError("missing bearer token")
        try:
            return self.tokens.verify(token)
        except InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc)
            raise UnauthorizedError(f"invalid or expired token: {exc}") from exc


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> int:
    """
    Extract and verify the Bearer token, returning the authenticated
    user id.
    """
    token = credentials.credentials if credentials is not None else None
    return AccessGate(tokens).resolve(token).user_id
