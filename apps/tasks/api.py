"""
Tasks API endpoints.

CRUD for tasks plus the expired/active/by-user/by-date/search views.
Listing every task requires a bearer token.
"""
from datetime import date
from typing import List, Optional
from uuid import UUID

from django.http import HttpRequest
from ninja import Query, Router

from apps.identity.decorators import bearer_required
from .schemas import ErrorOut, TaskIn, TaskOut
from .services import TaskService

router = Router(tags=["Tasks"])


# Fixed paths are registered before "/{task_id}" so they are matched first.

@router.get("", response={200: List[TaskOut], 401: ErrorOut})
@bearer_required
def list_tasks(request: HttpRequest):
    """
    Get all tasks.
    """
    return TaskService().list()


@router.get("/expired", response=List[TaskOut])
def list_expired_tasks(request: HttpRequest):
    """
    Get all expired tasks (due date in the past).
    """
    return TaskService().list_expired()


@router.get("/active", response=List[TaskOut])
def list_active_tasks(request: HttpRequest):
    """
    Get all active tasks (not yet due).
    """
    return TaskService().list_active()


@router.get("/byuser/{user_id}", response=List[TaskOut])
def list_tasks_by_user(request: HttpRequest, user_id: UUID):
    return TaskService().list_by_user(user_id)


@router.get("/bydate/{day}", response=List[TaskOut])
def list_tasks_by_date(request: HttpRequest, day: date):
    """
    Get tasks due on a specific date (yyyy-MM-dd).
    """
    return TaskService().list_by_date(day)


@router.get("/search", response=List[TaskOut])
def search_tasks(
    request: HttpRequest,
    keyword: Optional[str] = None,
    sort_by: str = Query("duedate", alias="sortBy"),
    order: str = "asc",
):
    """
    Search tasks by keyword in title or description.

    Query Parameters:
    - keyword: substring to match (ASCII letters case-insensitive)
    - sortBy: title, duedate or assignee
    - order: asc or desc

    Unrecognized sortBy/order values fall back to ascending due date.
    """
    return TaskService().search(keyword=keyword, sort_by=sort_by, order=order)


@router.get("/{task_id}", response={200: TaskOut, 404: ErrorOut})
def get_task(request: HttpRequest, task_id: UUID):
    return TaskService().get_by_id(task_id)


@router.post("", response={201: TaskOut, 400: ErrorOut, 404: ErrorOut})
def create_task(request: HttpRequest, payload: TaskIn):
    """
    Create a new task. The assignee must be an existing user.
    """
    task = TaskService().create(
        title=payload.title,
        description=payload.description,
        assignee_id=payload.assignee_id,
        due_date=payload.due_date,
    )
    return 201, task


@router.put("/{task_id}", response={204: None, 400: ErrorOut, 404: ErrorOut})
def update_task(request: HttpRequest, task_id: UUID, payload: TaskIn):
    """
    Replace every field of an existing task.
    """
    TaskService().update(
        task_id,
        title=payload.title,
        description=payload.description,
        assignee_id=payload.assignee_id,
        due_date=payload.due_date,
    )
    return 204, None


@router.delete("/{task_id}", response={204: None, 404: ErrorOut})
def delete_task(request: HttpRequest, task_id: UUID):
    TaskService().delete(task_id)
    return 204, None
