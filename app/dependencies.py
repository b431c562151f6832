"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Request

from app.errors import InvalidToken, NoToken
from app.services.jwt import get_jwt_service


@dataclass
class CurrentUser:
    """Authenticated user context."""

    user_id: str


def get_current_user(request: Request) -> CurrentUser:
    """Extract and validate the user from the Bearer token. Raises 401 if missing or invalid."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise NoToken()

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidToken()

    user_id = get_jwt_service().verify_token(token.strip())
    return CurrentUser(user_id=user_id)
