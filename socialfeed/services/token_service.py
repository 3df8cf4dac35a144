"""Service for issuing and verifying session tokens."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from socialfeed.domain.errors import InvalidTokenError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Stateless, signed, time-limited identity tokens (JWT).

    Nothing is persisted: a token is valid while its signature verifies and
    the current time is strictly before its ``exp`` claim.
    """

    def __init__(
        self,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        expiration: timedelta = timedelta(hours=1),
        clock: Optional[Clock] = None,
    ):
        if not jwt_secret:
            raise RuntimeError("JWT_SECRET is not configured.")
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.expiration = expiration
        self._clock = clock or _utc_now

    def issue(self, user_id: int) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: User ID placed in the ``sub`` claim

        Returns:
            JWT token string
        """
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self.expiration).timestamp()),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def verify(self, token: str) -> int:
        """
        Verify a token and return the user ID it was issued for.

        Raises:
            InvalidTokenError: On a bad signature, malformed token, missing
                claims, or when the token has reached its expiry
        """
        try:
            # Expiry is compared against the injected clock below.
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["sub", "iat", "exp"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected token: %s", exc)
            raise InvalidTokenError() from exc

        try:
            expires_at = int(payload["exp"])
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as exc:
            logger.warning("Rejected token with malformed claims")
            raise InvalidTokenError() from exc

        if self._clock().timestamp() >= expires_at:
            logger.warning("Rejected expired token for user %s", user_id)
            raise InvalidTokenError()
        return user_id
