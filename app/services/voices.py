"""Voice feed service: posting, replies, likes, listings and deletion."""

import logging
from typing import Any

from app.errors import UserNotFound, VoiceNotFound
from app.models.user import User
from app.models.voice import Reply, Voice
from app.services.uploads import get_upload_service
from app.store.base import Store

logger = logging.getLogger("voiceapp")


def audio_url(filename: str) -> str:
    """Path the static audio server exposes ``filename`` under."""
    return f"/audio/{filename}"


def public_user(user: User | None) -> dict[str, Any] | None:
    """Outward facing view of a user. Never includes the password hash."""
    if user is None:
        return None
    return {
        "id": user.id,
        "email": user.email,
        "city": user.city,
        "country": user.country,
        "profile_pic": user.profile_pic,
    }


class _UserLookup:
    """Memoizes user lookups while one listing is built."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self._cache: dict[str, dict[str, Any] | None] = {}

    def __call__(self, user_id: str) -> dict[str, Any] | None:
        if user_id not in self._cache:
            self._cache[user_id] = public_user(self.store.users.get_by_id(user_id))
        return self._cache[user_id]


def _reply_view(reply: Reply, lookup: _UserLookup) -> dict[str, Any]:
    return {
        "id": reply.id,
        "user_id": reply.user_id,
        "audio_url": audio_url(reply.file),
        "created_at": reply.created_at,
        "user": lookup(reply.user_id),
    }


class VoiceService:
    """Handles voice posts and everything attached to them."""

    def get_voice(self, store: Store, voice_id: str) -> Voice:
        """Look up a voice by id. Raises VoiceNotFound."""
        voice = store.voices.get(voice_id)
        if not voice:
            raise VoiceNotFound()
        return voice

    def post_voice(self, store: Store, user_id: str, filename: str) -> Voice:
        """Append a voice that snapshots the owner's current location."""
        user = store.users.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        voice = store.voices.append(Voice(user_id=user.id, file=filename, city=user.city, country=user.country))
        logger.info("User %s posted voice %s", user.id, voice.id)
        return voice

    def reply(self, store: Store, voice_id: str, user_id: str, filename: str) -> Reply:
        """Append a reply to an existing voice."""
        voice = self.get_voice(store, voice_id)
        return store.voices.add_reply(voice, Reply(user_id=user_id, file=filename))

    def set_like(self, store: Store, voice_id: str, user_id: str, like: bool) -> dict[str, Any]:
        """Like or unlike a voice. Returns the recomputed count and the caller's state."""
        voice = self.get_voice(store, voice_id)
        voice.apply_like(user_id, like)
        store.voices.save_likes(voice)
        return {"likes": voice.likes, "liked_by_user": voice.is_liked_by(user_id)}

    def list_feed(self, store: Store, caller_id: str) -> list[dict[str, Any]]:
        """All voices newest first, with poster, reply authors and the caller's like state."""
        lookup = _UserLookup(store)
        return [
            {
                "id": v.id,
                "user_id": v.user_id,
                "file": v.file,
                "audio_url": audio_url(v.file),
                "city": v.city,
                "country": v.country,
                "created_at": v.created_at,
                "likes": v.likes,
                "liked_by_user": v.is_liked_by(caller_id),
                "user": lookup(v.user_id),
                "replies": [_reply_view(r, lookup) for r in v.replies],
            }
            for v in reversed(store.voices.list_all())
        ]

    def list_mine(self, store: Store, user_id: str) -> list[dict[str, Any]]:
        """The caller's own voices, newest first."""
        lookup = _UserLookup(store)
        return [
            {
                "id": v.id,
                "audio_url": audio_url(v.file),
                "city": v.city,
                "country": v.country,
                "created_at": v.created_at,
                "likes": v.likes,
                "replies": [_reply_view(r, lookup) for r in v.replies],
            }
            for v in reversed(store.voices.list_by_owner(user_id))
        ]

    def get_replies(self, store: Store, voice_id: str) -> list[dict[str, Any]]:
        """Replies of one voice, oldest first."""
        voice = self.get_voice(store, voice_id)
        lookup = _UserLookup(store)
        return [_reply_view(r, lookup) for r in voice.replies]

    def delete_voice(self, store: Store, voice_id: str, user_id: str) -> None:
        """Delete a voice owned by ``user_id`` with its replies and audio files.

        A voice owned by someone else is reported as not found.
        """
        voice = store.voices.get(voice_id)
        if not voice or voice.user_id != user_id:
            raise VoiceNotFound()
        store.voices.remove(voice)

        uploads = get_upload_service()
        for filename in [voice.file, *(r.file for r in voice.replies)]:
            uploads.delete_file(filename)
        logger.info("User %s deleted voice %s", user_id, voice_id)


_voice_service: VoiceService | None = None


def get_voice_service() -> VoiceService:
    """Get singleton voice service instance."""
    global _voice_service
    if _voice_service is None:
        _voice_service = VoiceService()
    return _voice_service
