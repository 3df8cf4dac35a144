from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ...domain.errors import InvalidCredentialsError, UserAlreadyExistsError, UsernameTakenError
from ...domain.models import Gender, User
from ...domain.ports.persistence import UserRepository
from ...services.password_hasher import PasswordHasher
from ...services.token_service import TokenService
from ...services.username_generator import UsernameGenerator

logger = logging.getLogger(__name__)

USERNAME_ATTEMPTS = 3


class AuthService:
    """Registers members and exchanges credentials for session tokens."""

    def __init__(
        self,
        users: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        username_generator: Optional[UsernameGenerator] = None,
    ) -> None:
        self._users = users
        self._hasher = password_hasher
        self._tokens = token_service
        self._usernames = username_generator or UsernameGenerator(users.username_exists)

    def register(
        self,
        name: str,
        email: str,
        password: str,
        date_of_birth: Optional[date] = None,
        gender: Optional[Gender] = None,
    ) -> str:
        email_clean = email.strip().lower()
        if self._users.get_user_by_email(email_clean):
            raise UserAlreadyExistsError()
        password_hash = self._hasher.hash(password)
        user = None
        for attempt in range(1, USERNAME_ATTEMPTS + 1):
            username = self._usernames.generate()
            try:
                user = self._users.create_user(
                    name=name.strip(),
                    email=email_clean,
                    username=username,
                    password_hash=password_hash,
                    date_of_birth=date_of_birth,
                    gender=gender,
                )
                break
            except UsernameTakenError:
                logger.warning("Username %s taken during registration (attempt %s)", username, attempt)
                if attempt == USERNAME_ATTEMPTS:
                    raise
        logger.info("User registered: %s, username: %s", user.email, user.username)
        return self._tokens.issue(user.id)

    def login(self, email: str, password: str) -> str:
        user = self._users.get_user_by_email(email.strip().lower())
        if not user or not self._hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()
        logger.info("User logged in: %s", user.email)
        return self._tokens.issue(user.id)

    def logout(self, user_id: int) -> None:
        # Tokens are stateless; the client discards its copy.
        logger.info("User logged out: %s", user_id)

    def get_profile(self, user_id: int) -> Optional[User]:
        return self._users.get_user_by_id(user_id)
