from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....application.services.auth_service import AuthService
from ....core.dependencies import get_auth_service
from ....domain.errors import InvalidTokenError
from ....domain.models import User
from ...api.dependencies import require_caller_id
from ...api.schemas.auth import LoginRequest, RegisterRequest, TokenResponse

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=TokenResponse)
def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    token = auth_service.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
    )
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return TokenResponse(token=auth_service.login(payload.email, payload.password))


@router.post("/logout")
def logout(
    caller_id: int = Depends(require_caller_id),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    auth_service.logout(caller_id)
    return {"msg": "Logged out successfully"}


@router.get("/me")
def me(
    caller_id: int = Depends(require_caller_id),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    user = auth_service.get_profile(caller_id)
    if user is None:
        # Account removed after the token was issued.
        raise InvalidTokenError()
    return _serialize_user(user)


def _serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "username": user.username,
        "role": user.role.value,
        "date_of_birth": user.date_of_birth.isoformat() if user.date_of_birth else None,
        "gender": user.gender.value if user.gender else None,
        "created_at": user.created_at.replace(microsecond=0).isoformat(),
    }
