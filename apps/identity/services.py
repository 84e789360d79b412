"""
Services for Identity app.

AuthService handles registration and login; UserService is account CRUD
plus the owner-only operations. Both take their stores as constructor
arguments and default to the Django ORM stores.
"""
import logging
from typing import List, Optional
from uuid import UUID

from apps.core.exceptions import (
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from apps.tasks.dtos import TaskDTO
from apps.tasks.repositories import DjangoTaskRepository, TaskRepository
from .dtos import UserDTO
from .jwt_auth import create_access_token
from .models import EMAIL_MAX_LENGTH, USERNAME_MAX_LENGTH
from .repositories import DjangoUserRepository, UserRepository
from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


def _require(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(
            f"{', '.join(missing)} required.",
            details={"missing": missing},
        )


def _check_lengths(username: str, email: str) -> None:
    for name, value, limit in (
        ("username", username, USERNAME_MAX_LENGTH),
        ("email", email, EMAIL_MAX_LENGTH),
    ):
        if len(value) > limit:
            raise ValidationError(
                f"{name} must be at most {limit} characters.",
                details={"field": name, "max_length": limit},
            )


def _normalize_email(email: str) -> str:
    """Emails are unique regardless of case and stored lowercased."""
    return email.strip().lower()


class AuthService:

    def __init__(self, users: Optional[UserRepository] = None):
        self.users = users or DjangoUserRepository()

    def register(self, email: str, password: str) -> UserDTO:
        """
        Create an account for `email`; the username defaults to the email.

        Raises:
            ValidationError: email or password empty.
            ConflictError: email already registered.
        """
        _require(email=email, password=password)
        email = _normalize_email(email)
        # The username defaults to the email, so both limits apply
        _check_lengths(username=email, email=email)

        if self.users.get_by_email(email):
            raise ConflictError("User already exists.", details={"email": email})

        user = self.users.add(
            username=email,
            email=email,
            password_hash=hash_password(password),
        )
        logger.info(f"Registered user {user.id}")
        return user

    def login(self, email: str, password: str) -> str:
        """
        Verify credentials and return a signed access token.

        Raises:
            AuthError: unknown email or wrong password.
        """
        user = self.users.get_by_email(_normalize_email(email or ""))
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Rejected login attempt")
            raise AuthError("Invalid email or password.")

        logger.info(f"User {user.id} logged in")
        return create_access_token(user)


class UserService:

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        tasks: Optional[TaskRepository] = None,
    ):
        self.users = users or DjangoUserRepository()
        self.tasks = tasks or DjangoTaskRepository()

    def list(self) -> List[UserDTO]:
        return self.users.list_all()

    def get_by_id(self, user_id: UUID) -> UserDTO:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def create(self, username: str, email: str, password: str) -> UserDTO:
        _require(username=username, email=email, password=password)
        username, email = username.strip(), _normalize_email(email)
        _check_lengths(username, email)

        if self.users.get_by_email(email):
            raise ConflictError("User already exists.", details={"email": email})

        user = self.users.add(
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        logger.info(f"Created user {user.id}")
        return user

    def update(
        self,
        user_id: UUID,
        username: str,
        email: str,
        password: Optional[str] = None,
    ) -> UserDTO:
        """
        Replace username and email. The password is re-hashed only when a
        non-blank one is supplied.
        """
        self.get_by_id(user_id)
        _require(username=username, email=email)
        username, email = username.strip(), _normalize_email(email)
        _check_lengths(username, email)

        owner = self.users.get_by_email(email)
        if owner and owner.id != user_id:
            raise ConflictError("Email is already in use.", details={"email": email})

        updated = self.users.update(
            user_id,
            username=username,
            email=email,
            password_hash=hash_password(password) if password and password.strip() else None,
        )
        if updated is None:
            raise NotFoundError("User", user_id)
        logger.info(f"Updated user {user_id}")
        return updated

    def _require_owner(self, user_id: UUID, acting_user_id: UUID, action: str) -> None:
        if acting_user_id != user_id:
            logger.warning(f"User {acting_user_id} tried to {action} user {user_id}")
            raise ForbiddenError(f"You can only {action} your own account.")

    def delete(self, user_id: UUID, acting_user_id: UUID) -> None:
        """
        Delete the caller's own account.

        Tasks assigned to the user are left in place.
        """
        self._require_owner(user_id, acting_user_id, "delete")
        self.get_by_id(user_id)

        orphaned = len(self.tasks.list_by_assignee(user_id))
        if not self.users.delete(user_id):
            raise NotFoundError("User", user_id)

        logger.info(f"Deleted user {user_id}")
        if orphaned:
            logger.warning(f"User {user_id} deleted with {orphaned} assigned task(s) left orphaned")

    def list_tasks_for_user(self, user_id: UUID, acting_user_id: UUID) -> List[TaskDTO]:
        self._require_owner(user_id, acting_user_id, "view tasks of")
        self.get_by_id(user_id)
        return self.tasks.list_by_assignee(user_id)
