"""User domain model for feed members and moderators."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    USER = "user"
    MODERATOR = "moderator"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class User:
    """
    User entity for everyone who can sign in to the feed.

    Attributes:
        id: Unique identifier
        name: Display name
        email: User email address (unique)
        username: Generated handle (unique)
        password_hash: bcrypt hash of the password
        role: Either ``user`` or ``moderator``; never changed through the API
        date_of_birth: Optional birth date
        gender: Optional gender
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: int,
        name: str,
        email: str,
        username: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
        date_of_birth: Optional[date] = None,
        gender: Optional[Gender] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.username = username
        self.password_hash = password_hash
        self.role = role
        self.date_of_birth = date_of_birth
        self.gender = gender
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    @property
    def is_moderator(self) -> bool:
        return self.role == UserRole.MODERATOR

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username} role={self.role.value}>"
