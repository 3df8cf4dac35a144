from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ...domain import policies
from ...domain.errors import (
    AlreadyLikedError,
    CommentNotFoundError,
    ConcurrentUpdateError,
    ForbiddenError,
    NotLikedError,
    PostNotFoundError,
    ValidationError,
)
from ...domain.models import Comment, Like, Post
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class PostService:
    """Applies ownership rules to posts and their embedded likes and comments.

    Nothing is cached. Every mutation is a closure the store applies to the
    current document and writes back in the same step, so rule checks always
    see the version that gets written.
    """

    def __init__(
        self,
        persistence: PersistenceGateway,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._persistence = persistence
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # Queries ---------------------------------------------------------------
    def list_posts(self) -> List[Post]:
        return self._persistence.list_posts()

    def get_post(self, post_id: str) -> Post:
        post = self._persistence.get_post(post_id)
        if post is None:
            raise PostNotFoundError()
        return post

    # Post lifecycle --------------------------------------------------------
    def create_post(self, caller_id: int, text: Optional[str] = None, image: Optional[str] = None) -> Post:
        text, image = _clean(text), _clean(image)
        if text is None and image is None:
            raise ValidationError.single("Post must contain text or an image")
        post = self._persistence.create_post(caller_id, text, image, created_at=self._clock())
        logger.info("Post %s created by user: %s", post.id, caller_id)
        return post

    def edit_post(
        self,
        caller_id: int,
        post_id: str,
        text: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Post:
        def apply(post: Post) -> Post:
            if not policies.can_edit_post(caller_id, post):
                raise ForbiddenError()
            return replace(
                post,
                text=_clean(text) or post.text,
                image=_clean(image) or post.image,
                updated_at=self._clock(),
            )

        updated = self._mutate(post_id, apply)
        logger.info("Post %s edited by user: %s", post_id, caller_id)
        return updated

    def delete_post(self, caller_id: int, post_id: str) -> None:
        post = self.get_post(post_id)
        caller = self._persistence.get_user_by_id(caller_id)
        if not policies.can_delete_post(caller_id, caller, post):
            raise ForbiddenError()
        if not self._persistence.delete_post(post_id):
            raise PostNotFoundError()
        logger.info("Post %s removed by user: %s", post_id, caller_id)

    # Likes -----------------------------------------------------------------
    def like_post(self, caller_id: int, post_id: str) -> List[Like]:
        def apply(post: Post) -> Post:
            if post.is_liked_by(caller_id):
                raise AlreadyLikedError()
            return replace(post, likes=[Like(user_id=caller_id), *post.likes])

        updated = self._mutate(post_id, apply)
        logger.info("Post %s liked by user: %s", post_id, caller_id)
        return updated.likes

    def unlike_post(self, caller_id: int, post_id: str) -> List[Like]:
        def apply(post: Post) -> Post:
            if not post.is_liked_by(caller_id):
                raise NotLikedError()
            return replace(post, likes=[like for like in post.likes if like.user_id != caller_id])

        updated = self._mutate(post_id, apply)
        logger.info("Post %s unliked by user: %s", post_id, caller_id)
        return updated.likes

    # Comments --------------------------------------------------------------
    def add_comment(self, caller_id: int, post_id: str, text: str) -> List[Comment]:
        clean_text = _clean(text)
        if clean_text is None:
            raise ValidationError.single("Text is required", param="text")
        comment = Comment(
            id=uuid.uuid4().hex,
            author_id=caller_id,
            text=clean_text,
            created_at=self._clock(),
        )

        def apply(post: Post) -> Post:
            return replace(post, comments=[comment, *post.comments])

        updated = self._mutate(post_id, apply)
        logger.info("Comment %s added to post %s by user: %s", comment.id, post_id, caller_id)
        return updated.comments

    def delete_comment(self, caller_id: int, post_id: str, comment_id: str) -> List[Comment]:
        def apply(post: Post) -> Post:
            comment = post.find_comment(comment_id)
            if comment is None:
                raise CommentNotFoundError()
            if not policies.can_delete_comment(caller_id, post, comment):
                raise ForbiddenError()
            return replace(post, comments=[item for item in post.comments if item.id != comment_id])

        updated = self._mutate(post_id, apply)
        logger.info("Comment %s removed from post %s by user: %s", comment_id, post_id, caller_id)
        return updated.comments

    # Helpers ---------------------------------------------------------------
    def _mutate(self, post_id: str, mutation: Callable[[Post], Post]) -> Post:
        updated = self._persistence.mutate_post(post_id, mutation)
        if updated is None:
            logger.warning("Version conflict on post %s", post_id)
            raise ConcurrentUpdateError()
        return updated
