"""Store interfaces.

Route handlers and services only talk to these interfaces, so the backing
(process memory or a SQL database) can be swapped without touching them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.models.user import User
from app.models.voice import Reply, Voice


class UserStore(ABC):
    """Users keyed by email."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Insert a new user. Raises DuplicateUser if the email is taken."""

    @abstractmethod
    def get_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def get_by_id(self, user_id: str) -> User | None: ...

    @abstractmethod
    def update(self, user: User) -> User:
        """Persist changes made to ``user``."""


class VoiceStore(ABC):
    """Voices in insertion order, each owning its replies and liking set."""

    @abstractmethod
    def append(self, voice: Voice) -> Voice: ...

    @abstractmethod
    def get(self, voice_id: str) -> Voice | None: ...

    @abstractmethod
    def list_all(self) -> list[Voice]:
        """All voices, oldest first."""

    @abstractmethod
    def list_by_owner(self, user_id: str) -> list[Voice]:
        """Voices owned by ``user_id``, oldest first."""

    @abstractmethod
    def add_reply(self, voice: Voice, reply: Reply) -> Reply: ...

    @abstractmethod
    def save_likes(self, voice: Voice) -> Voice:
        """Persist ``voice.liked_by`` and ``voice.likes``."""

    @abstractmethod
    def remove(self, voice: Voice) -> None:
        """Delete the voice together with its replies and likes."""


@dataclass
class Store:
    """User and voice stores handed to services as one unit."""

    users: UserStore
    voices: VoiceStore
