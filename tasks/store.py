"""
Task store — owner-scoped CRUD and filtered listing.

Every read goes through the caller's identity: listing is always restricted
to ``owner_id == caller_id`` and single-task access resolves the task by id
before comparing its owner, so "no such task" and "not yours" stay distinct.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ForbiddenError, NotFoundError, ValidationError
from database.models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

TASK_FIELDS = ("title", "description", "status", "priority")

# largest value an INTEGER primary key can hold (SQLite and PostgreSQL bigint)
MAX_TASK_ID = 2**63 - 1


class LookupOutcome(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class TaskLookup:
    outcome: LookupOutcome
    task: Optional[Task] = None


def parse_status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError("invalid status value")


def parse_priority(value: Any) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError:
        raise ValidationError("invalid priority value")


def _empty_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


class TaskStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, fields: Mapping[str, Any], owner_id: int) -> Task:
        """Create a task owned by ``owner_id``; an ``owner_id`` in ``fields`` is ignored."""
        status = fields.get("status")
        priority = fields.get("priority")
        task = Task(
            title=fields["title"],
            description=_empty_to_none(fields.get("description")),
            status=parse_status(status) if status is not None else TaskStatus.TODO,
            priority=parse_priority(priority) if priority is not None else TaskPriority.MEDIUM,
            owner_id=owner_id,
        )
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        logger.info("Created task %s for user %s", task.id, owner_id)
        return task

    async def lookup(self, task_id: int, caller_id: int) -> TaskLookup:
        if not 0 < task_id <= MAX_TASK_ID:
            return TaskLookup(LookupOutcome.NOT_FOUND)
        task = await self.session.get(Task, task_id)
        if task is None:
            return TaskLookup(LookupOutcome.NOT_FOUND)
        if task.owner_id != caller_id:
            return TaskLookup(LookupOutcome.FORBIDDEN)
        return TaskLookup(LookupOutcome.FOUND, task)

    async def find_one(self, task_id: int, caller_id: int) -> Task:
        found = await self.lookup(task_id, caller_id)
        if found.outcome is LookupOutcome.NOT_FOUND:
            raise NotFoundError("task not found")
        if found.outcome is LookupOutcome.FORBIDDEN:
            logger.info("User %s denied access to task %s", caller_id, task_id)
            raise ForbiddenError("access denied")
        return found.task

    async def find_all(
        self,
        caller_id: int,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        """
        List the caller's tasks.

        Filters are ANDed with each other and with the owner predicate.
        ``search`` is a case-insensitive substring match on title or
        description; wildcard characters in it match literally.
        """
        stmt = select(Task).where(Task.owner_id == caller_id)

        if status:
            stmt = stmt.where(Task.status == parse_status(status))
        if priority:
            stmt = stmt.where(Task.priority == parse_priority(priority))
        if search:
            term = search.lower()
            stmt = stmt.where(
                or_(
                    func.lower(Task.title).contains(term, autoescape=True),
                    func.lower(Task.description).contains(term, autoescape=True),
                )
            )

        result = await self.session.execute(stmt.order_by(Task.id))
        return list(result.scalars().all())

    async def update(self, task_id: int, patch: Mapping[str, Any], caller_id: int) -> Task:
        task = await self.find_one(task_id, caller_id)

        if "title" in patch:
            task.title = patch["title"]
        if "description" in patch:
            task.description = _empty_to_none(patch["description"])
        if "status" in patch:
            task.status = parse_status(patch["status"])
        if "priority" in patch:
            task.priority = parse_priority(patch["priority"])
        # owner_id is never taken from the patch

        await self.session.flush()
        await self.session.refresh(task)
        changed = [name for name in TASK_FIELDS if name in patch]
        logger.info("Updated task %s (%s)", task.id, ", ".join(changed))
        return task

    async def remove(self, task_id: int, caller_id: int) -> None:
        task = await self.find_one(task_id, caller_id)
        await self.session.delete(task)
        await self.session.flush()
        logger.info("Deleted task %s of user %s", task_id, caller_id)
