"""
Task store.

`TaskRepository` is the interface the task and user services depend on.
Every read returns TaskDTOs with the assignee joined for display; a task
whose assignee was deleted comes back with ``assignee=None``.
"""
import string
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional
from uuid import UUID

from django.db.models import F, OuterRef, Q, QuerySet, Subquery
from django.utils import timezone

from apps.identity.models import User
from apps.identity.repositories import UserRepository
from .dtos import AssigneeDTO, SortField, TaskDTO, TaskOrdering
from .models import Task


class TaskRepository(ABC):
    """CRUD persistence for tasks plus the filtered views."""

    @abstractmethod
    def list_all(self) -> List[TaskDTO]:
        """All tasks, ascending due date."""
        pass

    @abstractmethod
    def get(self, task_id: UUID) -> Optional[TaskDTO]:
        pass

    @abstractmethod
    def add(self, title: str, description: str, assignee_id: UUID, due_date: datetime) -> TaskDTO:
        pass

    @abstractmethod
    def update(
        self,
        task_id: UUID,
        title: str,
        description: str,
        assignee_id: UUID,
        due_date: datetime,
    ) -> Optional[TaskDTO]:
        """Replace every field. Returns None if the task does not exist."""
        pass

    @abstractmethod
    def delete(self, task_id: UUID) -> bool:
        pass

    @abstractmethod
    def list_by_assignee(self, assignee_id: UUID) -> List[TaskDTO]:
        pass

    @abstractmethod
    def list_due_before(self, moment: datetime) -> List[TaskDTO]:
        """Tasks with due_date < moment."""
        pass

    @abstractmethod
    def list_due_from(self, moment: datetime) -> List[TaskDTO]:
        """Tasks with due_date >= moment."""
        pass

    @abstractmethod
    def list_due_on(self, day: date) -> List[TaskDTO]:
        """Tasks whose due date falls on `day` in the current time zone."""
        pass

    @abstractmethod
    def search(self, keyword: Optional[str], ordering: TaskOrdering) -> List[TaskDTO]:
        """
        Tasks whose title or description contains `keyword`, sorted by
        `ordering`. No keyword matches all.

        ASCII letters match case-insensitively. Other letters follow the
        database collation; SQLite and the in-memory store compare them
        exactly.
        """
        pass


def _assignee_dto(user) -> AssigneeDTO:
    return AssigneeDTO(id=user.id, username=user.username, email=user.email)


# =============================================================================
# Django ORM
# =============================================================================

class DjangoTaskRepository(TaskRepository):
    """Task store backed by the tasks_task table."""

    def _to_dtos(self, tasks: Iterable[Task]) -> List[TaskDTO]:
        tasks = list(tasks)
        users = {
            u.id: u for u in User.objects.filter(id__in={t.assignee_id for t in tasks})
        }
        return [self._to_dto(t, users.get(t.assignee_id)) for t in tasks]

    @staticmethod
    def _to_dto(task: Task, assignee: Optional[User]) -> TaskDTO:
        return TaskDTO(
            id=task.id,
            title=task.title,
            description=task.description,
            assignee_id=task.assignee_id,
            due_date=task.due_date,
            assignee=_assignee_dto(assignee) if assignee else None,
        )

    def _fetch_one(self, task_id: UUID) -> Optional[TaskDTO]:
        dtos = self._to_dtos(Task.objects.filter(id=task_id))
        return dtos[0] if dtos else None

    def list_all(self) -> List[TaskDTO]:
        return self._to_dtos(Task.objects.all())

    def get(self, task_id: UUID) -> Optional[TaskDTO]:
        return self._fetch_one(task_id)

    def add(self, title: str, description: str, assignee_id: UUID, due_date: datetime) -> TaskDTO:
        task = Task.objects.create(
            title=title,
            description=description,
            assignee_id=assignee_id,
            due_date=due_date,
        )
        return self._fetch_one(task.id)

    def update(
        self,
        task_id: UUID,
        title: str,
        description: str,
        assignee_id: UUID,
        due_date: datetime,
    ) -> Optional[TaskDTO]:
        try:
            task = Task.objects.get(id=task_id)
        except Task.DoesNotExist:
            return None

        task.title = title
        task.description = description
        task.assignee_id = assignee_id
        task.due_date = due_date
        task.save()
        return self._fetch_one(task_id)

    def delete(self, task_id: UUID) -> bool:
        deleted, _ = Task.objects.filter(id=task_id).delete()
        return deleted > 0

    def list_by_assignee(self, assignee_id: UUID) -> List[TaskDTO]:
        return self._to_dtos(Task.objects.filter(assignee_id=assignee_id))

    def list_due_before(self, moment: datetime) -> List[TaskDTO]:
        return self._to_dtos(Task.objects.filter(due_date__lt=moment))

    def list_due_from(self, moment: datetime) -> List[TaskDTO]:
        return self._to_dtos(Task.objects.filter(due_date__gte=moment))

    def list_due_on(self, day: date) -> List[TaskDTO]:
        return self._to_dtos(Task.objects.filter(due_date__date=day))

    def search(self, keyword: Optional[str], ordering: TaskOrdering) -> List[TaskDTO]:
        queryset = Task.objects.all()
        if keyword:
            queryset = queryset.filter(
                Q(title__icontains=keyword) |
                Q(description__icontains=keyword)
            )
        return self._to_dtos(self._apply_ordering(queryset, ordering))

    @staticmethod
    def _apply_ordering(queryset: QuerySet, ordering: TaskOrdering) -> QuerySet:
        if ordering.field == SortField.TITLE:
            column = 'title'
        elif ordering.field == SortField.ASSIGNEE:
            queryset = queryset.annotate(
                assignee_username=Subquery(
                    User.objects.filter(id=OuterRef('assignee_id')).values('username')[:1]
                )
            )
            column = 'assignee_username'
        else:
            column = 'due_date'

        # Orphaned tasks (no username) sort first ascending, last descending,
        # matching the in-memory store on every database backend.
        if ordering.descending:
            return queryset.order_by(F(column).desc(nulls_last=True), F('id').desc())
        return queryset.order_by(F(column).asc(nulls_first=True), F('id').asc())


# =============================================================================
# In-memory
# =============================================================================

# Folds only A-Z, like SQLite's LIKE behind icontains.
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class InMemoryTaskRepository(TaskRepository):
    """
    Dictionary-backed task store.

    Resolves assignees through the given user store, the way the ORM store
    joins against identity_user.
    """

    def __init__(self, users: UserRepository):
        self._users = users
        self._tasks: Dict[UUID, TaskDTO] = {}
        self._lock = threading.Lock()

    def _select(self, predicate: Callable[[TaskDTO], bool] = lambda t: True) -> List[TaskDTO]:
        with self._lock:
            tasks = [t for t in self._tasks.values() if predicate(t)]
        tasks.sort(key=lambda t: (t.due_date, t.id))
        return self._join(tasks)

    def _join(self, tasks: List[TaskDTO]) -> List[TaskDTO]:
        users = self._users.get_many(t.assignee_id for t in tasks)
        return [
            TaskDTO(
                id=t.id,
                title=t.title,
                description=t.description,
                assignee_id=t.assignee_id,
                due_date=t.due_date,
                assignee=_assignee_dto(users[t.assignee_id]) if t.assignee_id in users else None,
            )
            for t in tasks
        ]

    def list_all(self) -> List[TaskDTO]:
        return self._select()

    def get(self, task_id: UUID) -> Optional[TaskDTO]:
        tasks = self._select(lambda t: t.id == task_id)
        return tasks[0] if tasks else None

    def add(self, title: str, description: str, assignee_id: UUID, due_date: datetime) -> TaskDTO:
        task = TaskDTO(
            id=uuid.uuid4(),
            title=title,
            description=description,
            assignee_id=assignee_id,
            due_date=due_date,
        )
        with self._lock:
            self._tasks[task.id] = task
        return self._join([task])[0]

    def update(
        self,
        task_id: UUID,
        title: str,
        description: str,
        assignee_id: UUID,
        due_date: datetime,
    ) -> Optional[TaskDTO]:
        with self._lock:
            if task_id not in self._tasks:
                return None
            task = TaskDTO(
                id=task_id,
                title=title,
                description=description,
                assignee_id=assignee_id,
                due_date=due_date,
            )
            self._tasks[task_id] = task
        return self._join([task])[0]

    def delete(self, task_id: UUID) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None

    def list_by_assignee(self, assignee_id: UUID) -> List[TaskDTO]:
        return self._select(lambda t: t.assignee_id == assignee_id)

    def list_due_before(self, moment: datetime) -> List[TaskDTO]:
        return self._select(lambda t: t.due_date < moment)

    def list_due_from(self, moment: datetime) -> List[TaskDTO]:
        return self._select(lambda t: t.due_date >= moment)

    def list_due_on(self, day: date) -> List[TaskDTO]:
        return self._select(lambda t: timezone.localtime(t.due_date).date() == day)

    def search(self, keyword: Optional[str], ordering: TaskOrdering) -> List[TaskDTO]:
        if keyword:
            needle = keyword.translate(_ASCII_LOWER)
            tasks = self._select(
                lambda t: needle in t.title.translate(_ASCII_LOWER)
                or needle in t.description.translate(_ASCII_LOWER)
            )
        else:
            tasks = self._select()

        if ordering.field == SortField.TITLE:
            sort_key = lambda t: (t.title, t.id)
        elif ordering.field == SortField.ASSIGNEE:
            sort_key = lambda t: (t.assignee.username if t.assignee else "", t.id)
        else:
            sort_key = lambda t: (t.due_date, t.id)
        return sorted(tasks, key=sort_key, reverse=ordering.descending)
