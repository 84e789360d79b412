"""
API Schemas for Tasks app.
Pydantic/Ninja schemas for request/response validation.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from ninja import Schema


# =============================================================================
# Request Schemas
# =============================================================================

class TaskIn(Schema):
    """Full set of task fields, used for create and for replace-style update."""
    title: str
    description: str = ""
    assignee_id: UUID
    due_date: datetime


# =============================================================================
# Response Schemas
# =============================================================================

class AssigneeOut(Schema):
    id: UUID
    username: str
    email: str


class TaskOut(Schema):
    id: UUID
    title: str
    description: str
    assignee_id: UUID
    due_date: datetime
    assignee: Optional[AssigneeOut] = None


class ErrorOut(Schema):
    """Error response."""
    detail: str
    code: str
