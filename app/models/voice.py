"""Voice and reply models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Reply:
    """Audio reply attached to a voice. Has no lifecycle of its own."""

    user_id: str
    file: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)


@dataclass
class Voice:
    """Audio post in the feed.

    ``city`` and ``country`` are copied from the owner when the voice is
    created and are not updated by later profile edits.
    """

    user_id: str
    file: str
    city: str
    country: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    replies: list[Reply] = field(default_factory=list)
    liked_by: set[str] = field(default_factory=set)
    likes: int = 0

    def apply_like(self, user_id: str, like: bool) -> None:
        """Add or remove ``user_id`` from the liking set and recount."""
        if like:
            self.liked_by.add(user_id)
        else:
            self.liked_by.discard(user_id)
        self.likes = len(self.liked_by)

    def is_liked_by(self, user_id: str) -> bool:
        return user_id in self.liked_by
