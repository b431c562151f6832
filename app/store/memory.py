"""In-memory store. Contents live for the lifetime of the process."""

from app.errors import DuplicateUser
from app.models.user import User
from app.models.voice import Reply, Voice
from app.store.base import Store, UserStore, VoiceStore


class MemoryUserStore(UserStore):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def create(self, user: User) -> User:
        if user.email in self._users:
            raise DuplicateUser()
        self._users[user.email] = user
        return user

    def get_by_email(self, email: str) -> User | None:
        return self._users.get(email)

    def get_by_id(self, user_id: str) -> User | None:
        return next((u for u in self._users.values() if u.id == user_id), None)

    def update(self, user: User) -> User:
        self._users[user.email] = user
        return user


class MemoryVoiceStore(VoiceStore):
    def __init__(self) -> None:
        self._voices: list[Voice] = []

    def append(self, voice: Voice) -> Voice:
        self._voices.append(voice)
        return voice

    def get(self, voice_id: str) -> Voice | None:
        return next((v for v in self._voices if v.id == voice_id), None)

    def list_all(self) -> list[Voice]:
        return list(self._voices)

    def list_by_owner(self, user_id: str) -> list[Voice]:
        return [v for v in self._voices if v.user_id == user_id]

    def add_reply(self, voice: Voice, reply: Reply) -> Reply:
        voice.replies.append(reply)
        return reply

    def save_likes(self, voice: Voice) -> Voice:
        # Voices are held by reference, the caller already mutated this one.
        return voice

    def remove(self, voice: Voice) -> None:
        self._voices = [v for v in self._voices if v.id != voice.id]


class MemoryStore(Store):
    """Store backed by a dict of users and a list of voices."""

    def __init__(self) -> None:
        super().__init__(users=MemoryUserStore(), voices=MemoryVoiceStore())
