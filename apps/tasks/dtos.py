"""DTOs for Tasks app."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class AssigneeDTO:
    """Display data of the user a task is assigned to."""
    id: UUID
    username: str
    email: str


@dataclass(frozen=True)
class TaskDTO:
    id: UUID
    title: str
    description: str
    assignee_id: UUID
    due_date: datetime
    # None when the assignee account no longer exists
    assignee: Optional[AssigneeDTO] = None


class SortField:
    TITLE = 'title'
    DUE_DATE = 'duedate'
    ASSIGNEE = 'assignee'

    ALL = (TITLE, DUE_DATE, ASSIGNEE)


class SortOrder:
    ASC = 'asc'
    DESC = 'desc'

    ALL = (ASC, DESC)


@dataclass(frozen=True)
class TaskOrdering:
    """
    Validated sort instruction for task searches.

    Anything unrecognized falls back to ascending due date.
    """
    field: str = SortField.DUE_DATE
    descending: bool = False

    @classmethod
    def parse(cls, sort_by: Optional[str], order: Optional[str]) -> "TaskOrdering":
        field = (sort_by or SortField.DUE_DATE).strip().lower()
        direction = (order or SortOrder.ASC).strip().lower()
        if field not in SortField.ALL or direction not in SortOrder.ALL:
            return cls()
        return cls(field=field, descending=direction == SortOrder.DESC)
