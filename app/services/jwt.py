"""JWT Token Service."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings
from app.errors import InvalidToken, NoToken


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self) -> None:
        settings = get_settings()
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.JWT_EXPIRE_MINUTES

    def create_token(self, user_id: str) -> str:
        """Create a JWT token carrying the given user id."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        payload = {"sub": user_id, "exp": expire}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a JWT token. Returns None if invalid."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def verify_token(self, token: str | None) -> str:
        """Return the user id carried by ``token``.

        Raises NoToken for an empty token and InvalidToken for a bad signature,
        an expired token or a payload without a subject.
        """
        if not token:
            raise NoToken()
        payload = self.decode_token(token)
        if not payload or not payload.get("sub"):
            raise InvalidToken()
        return payload["sub"]

    def is_token_valid(self, token: str) -> bool:
        """Check if a token is valid."""
        return self.decode_token(token) is not None


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
