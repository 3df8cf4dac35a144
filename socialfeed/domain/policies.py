"""
Authorization predicates for post mutations.

Each rule is a pure function of the caller and the aggregate so it can be
checked without touching the store.
"""

from __future__ import annotations

from typing import Optional

from .models import Comment, Post, User


def can_edit_post(caller_id: int, post: Post) -> bool:
    return post.author_id == caller_id


def can_delete_post(caller_id: int, caller: Optional[User], post: Post) -> bool:
    """Authors may delete their own posts; moderators may delete any post.

    ``caller`` is the freshly loaded account of ``caller_id`` and may be None
    when the account no longer exists.
    """
    if post.author_id == caller_id:
        return True
    return caller is not None and caller.is_moderator


def can_delete_comment(caller_id: int, post: Post, comment: Comment) -> bool:
    return caller_id in (comment.author_id, post.author_id)
