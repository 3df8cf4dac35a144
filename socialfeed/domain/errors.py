from __future__ import annotations

from typing import Any, Dict, List, Optional


class FeedError(Exception):
    """Base exception for every failure the API reports to clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"msg": self.message}


# Input --------------------------------------------------------------------
class ValidationError(FeedError):
    """Malformed or missing input fields."""

    status_code = 400
    default_message = "Invalid request"

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__("; ".join(str(item.get("msg")) for item in errors) or None)

    @classmethod
    def single(cls, message: str, param: Optional[str] = None) -> "ValidationError":
        item: Dict[str, Any] = {"msg": message}
        if param:
            item["param"] = param
        return cls([item])

    def to_body(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class UserAlreadyExistsError(FeedError):
    status_code = 400
    default_message = "User already exists"

    def to_body(self) -> Dict[str, Any]:
        return {"errors": [{"msg": self.message}]}


class InvalidCredentialsError(FeedError):
    status_code = 400
    default_message = "Invalid Credentials"

    def to_body(self) -> Dict[str, Any]:
        return {"errors": [{"msg": self.message}]}


class UsernameTakenError(FeedError):
    """The generated handle was claimed between the availability check and the insert."""

    status_code = 409
    default_message = "Could not allocate a username, please try again"


# Identity -----------------------------------------------------------------
class AuthError(FeedError):
    status_code = 401
    default_message = "Authorization denied"


class MissingTokenError(AuthError):
    default_message = "No token, authorization denied"


class InvalidTokenError(AuthError):
    """Token is malformed, tampered with or expired; callers cannot tell which."""

    default_message = "Token is not valid"


class ForbiddenError(FeedError):
    # Ownership failures share 401 with token failures.
    status_code = 401
    default_message = "User not authorized"


# Resources ----------------------------------------------------------------
class PostNotFoundError(FeedError):
    status_code = 404
    default_message = "Post not found"


class CommentNotFoundError(FeedError):
    status_code = 404
    default_message = "Comment not found"


# Conflicts ----------------------------------------------------------------
class ConflictError(FeedError):
    status_code = 400
    default_message = "Conflict"


class AlreadyLikedError(ConflictError):
    default_message = "Post already liked"


class NotLikedError(ConflictError):
    default_message = "Post has not yet been liked"


class ConcurrentUpdateError(FeedError):
    """The post changed between read and conditional write."""

    status_code = 409
    default_message = "Post was modified by another request, please try again"
