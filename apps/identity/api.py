"""
Identity API endpoints.

Provides registration and login (bearer token issuance) plus user
management. Deleting an account and listing an account's tasks are
restricted to the account owner.
"""
from typing import List
from uuid import UUID

from django.http import HttpRequest, HttpResponse
from ninja import Router

from apps.tasks.schemas import ErrorOut, TaskOut
from .decorators import bearer_required
from .dtos import CredentialsIn, TokenOut, UserCreate, UserOut, UserUpdate
from .services import AuthService, UserService

router = Router(tags=["Auth"])
users_router = Router(tags=["Users"])


# =============================================================================
# Auth Endpoints
# =============================================================================

@router.post("/register", response={200: None, 400: ErrorOut})
def register(request: HttpRequest, payload: CredentialsIn):
    """
    Register a new user. The username defaults to the email.
    """
    AuthService().register(payload.email, payload.password)
    return HttpResponse("User registered successfully.", content_type="text/plain")


@router.post("/login", response={200: TokenOut, 401: ErrorOut})
def login(request: HttpRequest, payload: CredentialsIn):
    """
    Authenticate with email and password and receive a bearer token.
    """
    return {"token": AuthService().login(payload.email, payload.password)}


# =============================================================================
# User Management Endpoints
# =============================================================================

@users_router.get("", response=List[UserOut])
def list_users(request: HttpRequest):
    return UserService().list()


@users_router.get("/{user_id}", response={200: UserOut, 404: ErrorOut})
def get_user(request: HttpRequest, user_id: UUID):
    return UserService().get_by_id(user_id)


@users_router.post("", response={201: UserOut, 400: ErrorOut})
def create_user(request: HttpRequest, payload: UserCreate):
    """
    Create a new user (hashes password).
    """
    user = UserService().create(payload.username, payload.email, payload.password)
    return 201, user


@users_router.put("/{user_id}", response={204: None, 400: ErrorOut, 404: ErrorOut})
def update_user(request: HttpRequest, user_id: UUID, payload: UserUpdate):
    """
    Update username and email; the password changes only when supplied.
    """
    UserService().update(user_id, payload.username, payload.email, payload.password)
    return 204, None


@users_router.delete("/{user_id}", response={204: None, 401: ErrorOut, 403: ErrorOut, 404: ErrorOut})
@bearer_required
def delete_user(request: HttpRequest, user_id: UUID):
    """
    Delete your own account.
    """
    UserService().delete(user_id, acting_user_id=request.auth.user_id)
    return 204, None


@users_router.get("/{user_id}/tasks", response={200: List[TaskOut], 401: ErrorOut, 403: ErrorOut, 404: ErrorOut})
@bearer_required
def list_user_tasks(request: HttpRequest, user_id: UUID):
    """
    Get all tasks assigned to your own account.
    """
    return UserService().list_tasks_for_user(user_id, acting_user_id=request.auth.user_id)
