"""
Authenticator — signup, credential validation and token issuance.
"""

from __future__ import annotations

import logging
from typing import Optional

from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from core.errors import UnauthorizedError
from database.models import User
from users.directory import UserDirectory
from utils.schemas import AccessToken, SignupRequest

logger = logging.getLogger(__name__)


class Authenticator:
    def __init__(
        self,
        directory: UserDirectory,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
    ) -> None:
        self.directory = directory
        self.hasher = hasher
        self.tokens = tokens

    async def signup(self, candidate: SignupRequest) -> User:
        """
        Register a new user.

        Raises ``ConflictError`` when the username (checked first) or the
        email is already registered.
        """
        user = await self.directory.create(
            username=candidate.username,
            email=candidate.email,
            password_hash=self.hasher.hash(candidate.password),
            about=candidate.about,
            avatar=candidate.avatar,
        )
        logger.info("Registered user %s (%s)", user.username, user.id)
        return user

    async def validate_credentials(self, email: str, password: str) -> Optional[User]:
        """Return the user for a matching email + password, else ``None``."""
        user = await self.directory.find_by_email(email)
        if user is None or not self.hasher.verify(password, user.password_hash):
            return None
        return user

    def login(self, user: User) -> AccessToken:
        """Issue a token for an already-validated user."""
        return AccessToken(access_token=self.tokens.issue(user.id, user.email))

    async def signin(self, email: str, password: str) -> AccessToken:
        user = await self.validate_credentials(email, password)
        if user is None:
            logger.info("Rejected signin for %s", email)
            raise UnauthorizedError("invalid credentials")

        logger.info("Login: %s (%s)", user.username, user.id)
        return self.login(user)
