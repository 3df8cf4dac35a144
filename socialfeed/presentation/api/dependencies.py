from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader

from ...core.dependencies import get_token_service
from ...domain.errors import MissingTokenError
from ...services.token_service import TokenService

AUTH_HEADER = "x-auth-token"

_token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


def require_caller_id(
    token: Optional[str] = Depends(_token_header),
    token_service: TokenService = Depends(get_token_service),
) -> int:
    """Resolve the caller's user id from the ``x-auth-token`` header."""
    if not token:
        raise MissingTokenError()
    return token_service.verify(token)
