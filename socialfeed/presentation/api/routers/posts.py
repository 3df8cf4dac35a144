from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from ....application.services.post_service import PostService
from ....core.dependencies import get_post_service
from ....domain.models import Comment, Like, Post
from ...api.dependencies import require_caller_id
from ...api.schemas.posts import CommentCreatePayload, PostCreatePayload, PostEditPayload

router = APIRouter(prefix="/api/posts", tags=["Posts"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreatePayload,
    caller_id: int = Depends(require_caller_id),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    post = service.create_post(caller_id, text=payload.text, image=payload.image)
    return _serialize_post(post)


@router.get("")
def list_posts(service: PostService = Depends(get_post_service)) -> List[Dict[str, Any]]:
    return [_serialize_post(post) for post in service.list_posts()]


@router.put("/like/{post_id}")
def like_post(
    post_id: str,
    caller_id: int = Depends(require_caller_id),
    service: PostService = Depends(get_post_service),
) -> List[Dict[str, Any]]:
    return [_serialize_like(like) for like in service.like_post(caller_id, post_id)]


@router.put("/unlike/{post_id}")
def unlike_post(
    post_id: str,
    caller_id: int = Depends(require_caller_id),
    service: PostService = Depends(get_post_service),
) -> List[Dict[str, Any]]:
    return [_serialize_like(like) for like in service.unlike_post(caller_id, post_id)]


@router.post("/comment/{post_id}")
def add_comment(
    post_id: str,
    payload: CommentCreatePayload,
    caller_id: int = Depends(require_caller_id),
    service: PostService = Depends(get_post_service),
) -> List[Dict[str, Any]]:
    comments = service.add_comment(caller_id, post_id, payload.text)
    return [_serialize_comment(comment) for comment in comments]


@router.delete("/comment/{post_id}/{comment_id}")
def delete_comment(
    post_id: str,
    comment_id: str,
    caller_id: int = Depends(require_caller_id),
    service: PostService = Depends(get_post_service),
) -> List[Dict[str, Any]]:
    comments = service.delete_comment(caller_id, post_id, comment_id)
    return [_serialize_comment(comment) for comment in comments]


@router.get("/{post_id}")
def get_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    return _serialize_post(service.get_post(post_id))


@router.put("/{post_id}")
def edit_post(
    post_id: str,
    payload: PostEditPayload,
    caller_id: int = Depends(require_caller_id),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    post = service.edit_post(caller_id, post_id, text=payload.text, image=payload.image)
    return _serialize_post(post)


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    caller_id: int = Depends(require_caller_id),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    service.delete_post(caller_id, post_id)
    return {"msg": "Post removed"}


def _serialize_post(post: Post) -> Dict[str, Any]:
    return {
        "id": post.id,
        "author_id": post.author_id,
        "text": post.text,
        "image": post.image,
        "likes": [_serialize_like(like) for like in post.likes],
        "comments": [_serialize_comment(comment) for comment in post.comments],
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat(),
    }


def _serialize_like(like: Like) -> Dict[str, Any]:
    return {"user_id": like.user_id}


def _serialize_comment(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "author_id": comment.author_id,
        "text": comment.text,
        "created_at": comment.created_at.isoformat(),
    }
