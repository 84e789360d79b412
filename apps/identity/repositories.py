"""
User store.

`UserRepository` is the interface the services depend on. The Django ORM
implementation backs production; the in-memory one backs service tests.
Each service instance receives its own store, nothing is process-global.
"""
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from django.db import IntegrityError, transaction

from apps.core.exceptions import ConflictError
from .dtos import UserDTO
from .models import User


class UserRepository(ABC):
    """CRUD persistence for user accounts."""

    @abstractmethod
    def list_all(self) -> List[UserDTO]:
        pass

    @abstractmethod
    def get(self, user_id: UUID) -> Optional[UserDTO]:
        pass

    @abstractmethod
    def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, UserDTO]:
        """Resolve several ids at once; unknown ids are left out."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[UserDTO]:
        pass

    @abstractmethod
    def add(self, username: str, email: str, password_hash: str) -> UserDTO:
        """
        Persist a new user.

        Raises:
            ConflictError: if the email is already taken.
        """
        pass

    @abstractmethod
    def update(
        self,
        user_id: UUID,
        username: str,
        email: str,
        password_hash: Optional[str] = None,
    ) -> Optional[UserDTO]:
        """
        Replace username and email, and the hash when one is given.

        Returns None if the user does not exist.
        """
        pass

    @abstractmethod
    def delete(self, user_id: UUID) -> bool:
        pass


def _to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        username=user.username,
        email=user.email,
        password_hash=user.password_hash,
    )


class DjangoUserRepository(UserRepository):
    """User store backed by the identity_user table."""

    def list_all(self) -> List[UserDTO]:
        return [_to_dto(u) for u in User.objects.all()]

    def get(self, user_id: UUID) -> Optional[UserDTO]:
        try:
            return _to_dto(User.objects.get(id=user_id))
        except User.DoesNotExist:
            return None

    def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, UserDTO]:
        ids = set(user_ids)
        if not ids:
            return {}
        return {u.id: _to_dto(u) for u in User.objects.filter(id__in=ids)}

    def get_by_email(self, email: str) -> Optional[UserDTO]:
        try:
            return _to_dto(User.objects.get(email=email))
        except User.DoesNotExist:
            return None

    def add(self, username: str, email: str, password_hash: str) -> UserDTO:
        try:
            with transaction.atomic():
                user = User.objects.create(
                    username=username,
                    email=email,
                    password_hash=password_hash,
                )
        except IntegrityError:
            raise ConflictError("User already exists.", details={"email": email})
        return _to_dto(user)

    def update(
        self,
        user_id: UUID,
        username: str,
        email: str,
        password_hash: Optional[str] = None,
    ) -> Optional[UserDTO]:
        try:
            user = User.objects.get(id=user_id)
        except User.DoesNotExist:
            return None

        user.username = username
        user.email = email
        if password_hash:
            user.password_hash = password_hash

        try:
            with transaction.atomic():
                user.save()
        except IntegrityError:
            raise ConflictError("Email is already in use.", details={"email": email})
        return _to_dto(user)

    def delete(self, user_id: UUID) -> bool:
        deleted, _ = User.objects.filter(id=user_id).delete()
        return deleted > 0


class InMemoryUserRepository(UserRepository):
    """Dictionary-backed user store, one instance per service under test."""

    def __init__(self):
        self._users: Dict[UUID, UserDTO] = {}
        self._lock = threading.Lock()

    def list_all(self) -> List[UserDTO]:
        with self._lock:
            return sorted(self._users.values(), key=lambda u: u.username)

    def get(self, user_id: UUID) -> Optional[UserDTO]:
        with self._lock:
            return self._users.get(user_id)

    def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, UserDTO]:
        with self._lock:
            return {uid: self._users[uid] for uid in set(user_ids) if uid in self._users}

    def get_by_email(self, email: str) -> Optional[UserDTO]:
        with self._lock:
            return self._find_by_email(email)

    def _find_by_email(self, email: str) -> Optional[UserDTO]:
        return next((u for u in self._users.values() if u.email == email), None)

    def add(self, username: str, email: str, password_hash: str) -> UserDTO:
        with self._lock:
            if self._find_by_email(email):
                raise ConflictError("User already exists.", details={"email": email})
            user = UserDTO(
                id=uuid.uuid4(),
                username=username,
                email=email,
                password_hash=password_hash,
            )
            self._users[user.id] = user
            return user

    def update(
        self,
        user_id: UUID,
        username: str,
        email: str,
        password_hash: Optional[str] = None,
    ) -> Optional[UserDTO]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            owner = self._find_by_email(email)
            if owner and owner.id != user_id:
                raise ConflictError("Email is already in use.", details={"email": email})
            updated = UserDTO(
                id=user_id,
                username=username,
                email=email,
                password_hash=password_hash or current.password_hash,
            )
            self._users[user_id] = updated
            return updated

    def delete(self, user_id: UUID) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None
