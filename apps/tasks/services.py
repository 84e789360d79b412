import logging
from datetime import date, datetime, timezone as dt_timezone
from typing import Callable, List, Optional
from uuid import UUID

from django.utils import timezone

from apps.core.exceptions import NotFoundError, ValidationError
from apps.identity.repositories import DjangoUserRepository, UserRepository
from .dtos import TaskDTO, TaskOrdering
from .models import TITLE_MAX_LENGTH
from .repositories import DjangoTaskRepository, TaskRepository

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    """Naive timestamps from clients are taken as UTC."""
    if timezone.is_naive(value):
        return timezone.make_aware(value, dt_timezone.utc)
    return value


class TaskService:
    """
    Task CRUD and the derived views (expired, active, by user, by date,
    search).

    The clock is injectable so expiry can be tested deterministically.
    """

    def __init__(
        self,
        tasks: Optional[TaskRepository] = None,
        users: Optional[UserRepository] = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.users = users or DjangoUserRepository()
        self.tasks = tasks or DjangoTaskRepository()
        self.clock = clock

    def list(self) -> List[TaskDTO]:
        return self.tasks.list_all()

    def get_by_id(self, task_id: UUID) -> TaskDTO:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def _validate(self, title: str, assignee_id: UUID) -> None:
        if not title or not title.strip():
            raise ValidationError("Title is required.", details={"missing": ["title"]})
        if len(title.strip()) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be at most {TITLE_MAX_LENGTH} characters.",
                details={"field": "title", "max_length": TITLE_MAX_LENGTH},
            )
        if self.users.get(assignee_id) is None:
            raise NotFoundError("Assignee", assignee_id)

    def create(
        self,
        title: str,
        description: str,
        assignee_id: UUID,
        due_date: datetime,
    ) -> TaskDTO:
        """
        Create a task for an existing user.

        Raises:
            ValidationError: empty or overlong title.
            NotFoundError: the assignee does not exist; nothing is stored.
        """
        self._validate(title, assignee_id)
        task = self.tasks.add(
            title=title.strip(),
            description=description or "",
            assignee_id=assignee_id,
            due_date=_aware(due_date),
        )
        logger.info(f"Created task {task.id} for user {assignee_id}")
        return task

    def update(
        self,
        task_id: UUID,
        title: str,
        description: str,
        assignee_id: UUID,
        due_date: datetime,
    ) -> TaskDTO:
        """Replace every field of an existing task. The assignee must exist."""
        self.get_by_id(task_id)
        self._validate(title, assignee_id)

        task = self.tasks.update(
            task_id,
            title=title.strip(),
            description=description or "",
            assignee_id=assignee_id,
            due_date=_aware(due_date),
        )
        if task is None:
            raise NotFoundError("Task", task_id)
        logger.info(f"Updated task {task_id}")
        return task

    def delete(self, task_id: UUID) -> None:
        if not self.tasks.delete(task_id):
            raise NotFoundError("Task", task_id)
        logger.info(f"Deleted task {task_id}")

    def list_expired(self) -> List[TaskDTO]:
        return self.tasks.list_due_before(self.clock())

    def list_active(self) -> List[TaskDTO]:
        return self.tasks.list_due_from(self.clock())

    def list_by_user(self, assignee_id: UUID) -> List[TaskDTO]:
        return self.tasks.list_by_assignee(assignee_id)

    def list_by_date(self, day: date) -> List[TaskDTO]:
        return self.tasks.list_due_on(day)

    def search(
        self,
        keyword: Optional[str] = None,
        sort_by: Optional[str] = "duedate",
        order: Optional[str] = "asc",
    ) -> List[TaskDTO]:
        """
        Keyword search over title and description with sorting.

        sort_by is one of title, duedate, assignee; order is asc or desc.
        Unrecognized values fall back to ascending due date.
        """
        keyword = keyword.strip() if keyword else None
        return self.tasks.search(keyword or None, TaskOrdering.parse(sort_by, order))
