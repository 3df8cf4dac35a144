from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(slots=True, frozen=True)
class Like:
    user_id: int


@dataclass(slots=True, frozen=True)
class Comment:
    id: str
    author_id: int
    text: str
    created_at: datetime


@dataclass(slots=True)
class Post:
    """A post together with its embedded likes and comments.

    ``likes`` and ``comments`` are kept newest first. ``version`` is bumped by
    the store on every write and guards conditional updates.
    """

    id: str
    author_id: int
    text: Optional[str]
    image: Optional[str]
    created_at: datetime
    updated_at: datetime
    likes: List[Like] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    version: int = 0

    def is_liked_by(self, user_id: int) -> bool:
        return any(like.user_id == user_id for like in self.likes)

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None
