"""Authentication and profile service."""

import base64
import hashlib
import logging
from dataclasses import dataclass

import bcrypt

from app.errors import DuplicateUser, InvalidCredentials, MissingField, UserNotFound
from app.models.user import DEFAULT_LOCATION, User
from app.services.jwt import get_jwt_service
from app.store.base import Store

logger = logging.getLogger("voiceapp")


@dataclass
class AuthResult:
    """Token and user returned by a successful signup or login."""

    token: str
    user: User


def _prehash(password: str) -> bytes:
    # bcrypt rejects input over 72 bytes; the digest is always 44.
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def _check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))


class AuthService:
    """Handles signup, login and profile updates."""

    def signup(
        self,
        store: Store,
        email: str | None,
        password: str | None,
        city: str | None = None,
        country: str | None = None,
    ) -> AuthResult:
        """Register a new user and issue a token."""
        if not email or not password:
            raise MissingField()

        if store.users.get_by_email(email):
            raise DuplicateUser()

        user = store.users.create(
            User(
                email=email,
                password_hash=_hash_password(password),
                city=city or DEFAULT_LOCATION,
                country=country or DEFAULT_LOCATION,
            )
        )
        logger.info("Signed up user %s", user.id)

        token = get_jwt_service().create_token(user.id)
        return AuthResult(token=token, user=user)

    def login(self, store: Store, email: str | None, password: str | None) -> AuthResult:
        """Authenticate by email and password and issue a fresh token."""
        user = store.users.get_by_email(email) if email else None
        if not user or not password or not _check_password(password, user.password_hash):
            raise InvalidCredentials()

        token = get_jwt_service().create_token(user.id)
        return AuthResult(token=token, user=user)

    def get_user(self, store: Store, user_id: str) -> User:
        """Look up a user by id. Raises UserNotFound."""
        user = store.users.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        return user

    def update_profile(
        self,
        store: Store,
        user_id: str,
        city: str | None = None,
        country: str | None = None,
    ) -> User:
        """Overwrite only the provided location fields."""
        user = self.get_user(store, user_id)
        user.city = city or user.city
        user.country = country or user.country
        return store.users.update(user)

    def set_profile_picture(self, store: Store, user_id: str, filename: str) -> User:
        """Record an already stored picture filename on the user."""
        user = self.get_user(store, user_id)
        user.profile_pic = filename
        return store.users.update(user)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
