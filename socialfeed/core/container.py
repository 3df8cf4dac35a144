from dataclasses import dataclass

from ..application.services.auth_service import AuthService
from ..application.services.post_service import PostService
from .config import Settings
from ..domain.ports.persistence import PersistenceGateway
from ..services.password_hasher import PasswordHasher
from ..services.token_service import TokenService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    password_hasher: PasswordHasher
    token_service: TokenService
    auth_service: AuthService
    post_service: PostService
