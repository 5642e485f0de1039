"""
Profile routes for the authenticated user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_user_directory
from auth.dependencies import get_current_user_id
from users.directory import UserDirectory
from utils.schemas import UpdateUserRequest, UserOut

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    directory: UserDirectory = Depends(get_user_directory),
) -> UserOut:
    return await directory.get(user_id)


@router.patch("/me", response_model=UserOut)
async def update_profile(
    req: UpdateUserRequest,
    user_id: int = Depends(get_current_user_id),
    directory: UserDirectory = Depends(get_user_directory),
) -> UserOut:
    """Only the fields sent in the body are touched; ``""`` clears about/avatar."""
    return await directory.update(user_id, req.model_dump(exclude_unset=True))
