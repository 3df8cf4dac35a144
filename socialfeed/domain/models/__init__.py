"""Domain models for the social feed."""

from .post import Comment, Like, Post
from .user import Gender, User, UserRole

__all__ = [
    "Comment",
    "Gender",
    "Like",
    "Post",
    "User",
    "UserRole",
]
