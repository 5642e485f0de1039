"""
Task routes. Every endpoint runs as the authenticated caller.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_task_store
from auth.dependencies import get_current_user_id
from tasks.store import TaskStore
from utils.schemas import CreateTaskRequest, TaskOut, UpdateTaskRequest

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task(
    req: CreateTaskRequest,
    user_id: int = Depends(get_current_user_id),
    store: TaskStore = Depends(get_task_store),
) -> TaskOut:
    return await store.create(req.model_dump(exclude_unset=True), owner_id=user_id)


@router.get("", response_model=List[TaskOut])
async def list_tasks(
    task_status: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    search: Optional[str] = None,
    user_id: int = Depends(get_current_user_id),
    store: TaskStore = Depends(get_task_store),
) -> List[TaskOut]:
    """List the caller's tasks, optionally filtered by status, priority and a search term."""
    return await store.find_all(user_id, status=task_status, priority=priority, search=search)


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    store: TaskStore = Depends(get_task_store),
) -> TaskOut:
    return await store.find_one(task_id, user_id)


@router.patch("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: int,
    req: UpdateTaskRequest,
    user_id: int = Depends(get_current_user_id),
    store: TaskStore = Depends(get_task_store),
) -> TaskOut:
    return await store.update(task_id, req.model_dump(exclude_unset=True), user_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    store: TaskStore = Depends(get_task_store),
) -> Response:
    await store.remove(task_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
