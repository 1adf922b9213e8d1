import logging
from datetime import datetime, timezone
from typing import List, Optional, Any
from sqlalchemy import select

from core.enums import TaskComplexity, TaskUrgency, TaskStatus
from core.utils import to_optional_float
from core.assignment.detection import detect_task_complexity, detect_task_urgency
from core.assignment.models import TaskData
from database.models import Task, TaskCategory
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def to_task_data(task: Any, category_slug: Optional[str] = None) -> TaskData:
    """Build a matching snapshot from a task row.

    Complexity and urgency are auto-detected when the row does not set them.
    """
    required_skills = list(task.required_skills or [])

    if task.complexity:
        complexity = TaskComplexity(task.complexity)
    else:
        complexity = detect_task_complexity(
            to_optional_float(task.estimated_hours),
            len(required_skills),
            task.description
        )

    if task.urgency:
        urgency = TaskUrgency(task.urgency)
    else:
        urgency = detect_task_urgency(task.deadline)

    return TaskData(
        id=str(task.id),
        client_id=task.client_id,
        title=task.title or "",
        complexity=complexity,
        urgency=urgency,
        category_slug=category_slug,
        required_skills=required_skills,
        deadline=task.deadline,
        status=TaskStatus(task.status) if task.status else TaskStatus.PENDING,
        escalation_level=task.escalation_level or 1,
    )


class TaskRepository(BaseRepository):
    def get_task(self, task_id: Any) -> Optional[Task]:
        stmt = select(Task).where(Task.id == task_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_task_for_update(self, task_id: Any) -> Optional[Task]:
        """Row-locked fetch, so concurrent declines for one task serialize."""
        stmt = select(Task).where(Task.id == task_id).with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_task_data(self, task_id: Any, lock: bool = False) -> Optional[TaskData]:
        task = self.get_task_for_update(task_id) if lock else self.get_task(task_id)
        if task is None:
            return None

        category_slug = None
        if task.category_id:
            category_slug = self.db.execute(
                select(TaskCategory.slug).where(TaskCategory.id == task.category_id)
            ).scalar_one_or_none()

        return to_task_data(task, category_slug)

    def get_urgency(self, task_id: Any) -> Optional[str]:
        """Stored urgency, or the one detected from the deadline when unset."""
        row = self.db.execute(
            select(Task.urgency, Task.deadline).where(Task.id == task_id)
        ).one_or_none()
        if row is None:
            return None
        urgency, deadline = row
        return urgency or detect_task_urgency(deadline).value

    def get_completed_tasks_for_artist(self, artist_id: str) -> List[Task]:
        stmt = select(Task).where(
            Task.freelancer_id == artist_id,
            Task.status == TaskStatus.COMPLETED.value
        )
        return list(self.db.execute(stmt).scalars().all())

    def _set_offer_state(
        self,
        task_id: Any,
        status: TaskStatus,
        offered_to: Optional[str],
        offer_expires_at: Optional[datetime],
        escalation_level: int
    ) -> None:
        task = self.get_task(task_id)
        if task is None:
            logger.warning(f"Task {task_id} disappeared before its offer state could be updated")
            return

        task.status = status.value
        task.offered_to = offered_to
        task.offer_expires_at = offer_expires_at
        task.escalation_level = escalation_level
        task.updated_at = datetime.now(timezone.utc)

    def mark_offered(
        self,
        task_id: Any,
        artist_id: str,
        offer_expires_at: datetime,
        escalation_level: int
    ) -> None:
        self._set_offer_state(task_id, TaskStatus.OFFERED, artist_id, offer_expires_at, escalation_level)

    def reset_for_broadcast(self, task_id: Any, escalation_level: int = 3) -> None:
        self._set_offer_state(task_id, TaskStatus.PENDING, None, None, escalation_level)

    def mark_unassignable(self, task_id: Any, escalation_level: int = 4) -> None:
        self._set_offer_state(task_id, TaskStatus.UNASSIGNABLE, None, None, escalation_level)

    def mark_assigned(
        self,
        task_id: Any,
        artist_id: str,
        working_deadline: Optional[datetime] = None,
        assigned_at: Optional[datetime] = None
    ) -> None:
        task = self.get_task(task_id)
        if task is None:
            logger.warning(f"Task {task_id} not found, cannot assign to {artist_id}")
            return

        now = assigned_at or datetime.now(timezone.utc)
        task.status = TaskStatus.ASSIGNED.value
        task.freelancer_id = artist_id
        task.assigned_at = now
        task.working_deadline = working_deadline
        task.offered_to = None
        task.offer_expires_at = None
        task.updated_at = now
