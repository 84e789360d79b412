"""DTOs for Identity app."""
from dataclasses import dataclass, field
from uuid import UUID
from typing import Optional

from ninja import Schema


@dataclass(frozen=True)
class UserDTO:
    id: UUID
    username: str
    email: str
    password_hash: str = field(default="", repr=False, compare=False)


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a validated bearer token."""
    user_id: UUID
    username: str
    email: str


class CredentialsIn(Schema):
    email: str
    password: str


class TokenOut(Schema):
    token: str


class UserCreate(Schema):
    username: str
    email: str
    password: str


class UserUpdate(Schema):
    username: str
    email: str
    # Blank or missing keeps the current password
    password: Optional[str] = None


class UserOut(Schema):
    id: UUID
    username: str
    email: str
