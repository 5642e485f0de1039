"""
Auth API routes — signup, signin.

Route prefix: /api/v1
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from api.dependencies import get_authenticator
from auth.service import Authenticator
from utils.schemas import AccessToken, SigninRequest, SignupRequest, UserOut

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    auth: Authenticator = Depends(get_authenticator),
) -> UserOut:
    """Register a new user."""
    return await auth.signup(req)


@router.post("/signin", response_model=AccessToken)
async def signin(
    req: SigninRequest,
    auth: Authenticator = Depends(get_authenticator),
) -> AccessToken:
    """Exchange email + password for an access token."""
    return await auth.signin(req.email, req.password)
