from __future__ import annotations

from datetime import date, datetime
from typing import Callable, List, Optional, Protocol

from ..models import Gender, Post, User, UserRole


class UserRepository(Protocol):
    """Persistence functions related to member accounts."""

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        ...

    def username_exists(self, username: str) -> bool:
        ...

    def create_user(
        self,
        name: str,
        email: str,
        username: str,
        password_hash: str,
        date_of_birth: Optional[date] = None,
        gender: Optional[Gender] = None,
    ) -> User:
        ...

    def update_user_role(self, user_id: int, role: UserRole) -> User:
        ...


class PostRepository(Protocol):
    """Post documents with embedded likes and comments, keyed by id."""

    def create_post(
        self,
        author_id: int,
        text: Optional[str],
        image: Optional[str],
        created_at: datetime,
    ) -> Post:
        ...

    def get_post(self, post_id: str) -> Optional[Post]:
        ...

    def list_posts(self) -> List[Post]:
        ...

    def mutate_post(self, post_id: str, mutation: Callable[[Post], Post]) -> Optional[Post]:
        """Apply ``mutation`` to the current document and write the result.

        The read and the version-guarded write happen as one unit, so changes
        from the same store never overwrite each other. Exceptions raised by
        ``mutation`` abort the write. Raises ``PostNotFoundError`` for an
        unknown id; returns None when another writer bumped the version first.
        """
        ...

    def delete_post(self, post_id: str) -> bool:
        ...


class PersistenceGateway(
    UserRepository,
    PostRepository,
    Protocol,
):
    """Composite gateway combining every persistence concern used by the app."""

    def close(self) -> None:
        ...
