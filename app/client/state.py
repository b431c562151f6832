"""Client application state: screens, tabs, feed data and capture sessions."""

import logging
import threading
from enum import Enum
from typing import Any

import httpx

from app.client.api import ApiError, VoiceAppAPI
from app.client.polling import DEFAULT_POLL_INTERVAL, FeedPoller
from app.client.recording import CaptureDevice, CaptureSession, Recording
from app.client.waveform import AudioClip, PlayerFactory, WaveformRegistry

logger = logging.getLogger("voiceapp.client")

# Server rejections and transport failures (refused connection, timeout).
REQUEST_ERRORS = (ApiError, httpx.HTTPError)


def describe(error: Exception) -> str:
    """User facing text for a failed request."""
    if isinstance(error, ApiError):
        return error.message
    return str(error) or type(error).__name__


class Screen(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    MAIN = "main"


class Tab(str, Enum):
    FEED = "feed"
    PROFILE = "profile"


class NotSignedIn(Exception):
    """Action needs the main screen."""


class ClientApp:
    """State machine mirroring the browser client.

    ``login``/``signup`` lead to the main screen; within it the feed and
    profile tabs show the feed and the user's own voices. Displayed like
    counts always come from the server. Failed auth calls are kept in
    ``alerts``; other failed mutations are logged and kept in ``notices``.
    Clips that could not be uploaded wait in ``unsent`` for ``resend``.

    The feed poller thread and the caller share the listings and the
    waveform registry; both are only touched while holding ``_lock``.
    """

    def __init__(
        self,
        api: VoiceAppAPI,
        device: CaptureDevice | None = None,
        reply_device: CaptureDevice | None = None,
        player_factory: PlayerFactory | None = None,
        poll_interval: float | None = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.api = api
        self.screen = Screen.LOGIN
        self.tab = Tab.FEED
        self.user: dict[str, Any] | None = None
        self.voices: list[dict[str, Any]] = []
        self.my_voices: list[dict[str, Any]] = []
        self.alerts: list[str] = []
        self.notices: list[str] = []
        self.unsent: list[Recording] = []

        self.recorder = CaptureSession(device) if device else None
        self.reply_recorder = CaptureSession(reply_device or device) if (reply_device or device) else None
        self.waveforms = WaveformRegistry(player_factory or (lambda key, url: AudioClip(api.fetch_audio, url)))
        self.poller = FeedPoller(self.refresh_feed, poll_interval) if poll_interval else None

        self._lock = threading.RLock()
        self._feed_seq = 0
        self._applied_feed_seq = 0

    # --- navigation ---

    def show_signup(self) -> None:
        if self.screen is Screen.LOGIN:
            self.screen = Screen.SIGNUP

    def show_login(self) -> None:
        if self.screen is Screen.SIGNUP:
            self.screen = Screen.LOGIN

    def select_tab(self, tab: Tab) -> None:
        self._require_main()
        self.tab = Tab(tab)
        if self.tab is Tab.PROFILE:
            self.refresh_mine()

    def _require_main(self) -> None:
        if self.screen is not Screen.MAIN:
            raise NotSignedIn("Sign in first")

    # --- auth ---

    def signup(self, email: str, password: str, city: str | None = None, country: str | None = None) -> bool:
        try:
            data = self.api.signup(email, password, city, country)
        except REQUEST_ERRORS as e:
            self._alert("Signup", e)
            return False
        self._enter_main(data["user"])
        return True

    def login(self, email: str, password: str) -> bool:
        try:
            data = self.api.login(email, password)
        except REQUEST_ERRORS as e:
            self._alert("Login", e)
            return False
        self._enter_main(data["user"])
        return True

    def logout(self) -> None:
        if self.poller:
            self.poller.stop()
        for session in (self.recorder, self.reply_recorder):
            if session:
                session.cancel()
        with self._lock:
            self.waveforms.clear()
            self.voices = []
            self.my_voices = []
        self.unsent = []
        self.api.token = None
        self.user = None
        self.screen = Screen.LOGIN
        self.tab = Tab.FEED

    def _enter_main(self, user: dict[str, Any]) -> None:
        self.user = user
        self.screen = Screen.MAIN
        self.tab = Tab.FEED
        self.refresh()
        if self.poller:
            self.poller.start()

    # --- loading ---

    def next_feed_seq(self) -> int:
        with self._lock:
            self._feed_seq += 1
            return self._feed_seq

    def apply_feed(self, seq: int, voices: list[dict[str, Any]]) -> bool:
        """Adopt ``voices`` unless a newer feed response was already applied."""
        with self._lock:
            if seq < self._applied_feed_seq:
                return False
            self._applied_feed_seq = seq
            self.voices = voices
            self._sync_waveforms()
        return True

    def refresh_feed(self) -> None:
        if self.screen is not Screen.MAIN:
            return
        seq = self.next_feed_seq()
        self.apply_feed(seq, self.api.list_voices())

    def refresh_mine(self) -> None:
        if self.screen is not Screen.MAIN:
            return
        voices = self.api.list_my_voices()
        with self._lock:
            self.my_voices = voices
            self._sync_waveforms()

    def refresh(self) -> None:
        try:
            self.refresh_feed()
            self.refresh_mine()
        except REQUEST_ERRORS as e:
            self._failed("Refresh", e)

    def _sync_waveforms(self) -> None:
        with self._lock:
            urls: dict[str, str] = {}
            for scope, voices in (("feed", self.voices), ("mine", self.my_voices)):
                for voice in voices:
                    urls[f"{scope}-{voice['id']}"] = voice["audioUrl"]
                    for reply in voice.get("replies", []):
                        urls[f"{scope}-reply-{reply['id']}"] = reply["audioUrl"]
            self.waveforms.retain(urls)
            for key, url in urls.items():
                self.waveforms.ensure(key, url)

    def play(self, voice_id: str, mine: bool = False) -> bool:
        key = f"{'mine' if mine else 'feed'}-{voice_id}"
        try:
            return self.waveforms.toggle(key)
        except REQUEST_ERRORS as e:
            self._failed("Playback", e)
            return False

    # --- recording ---

    def start_recording(self) -> None:
        self._require_main()
        self._session(self.recorder).start()

    def stop_recording(self) -> str | None:
        """Stop the main session, post the clip and refresh. Returns the new voice id."""
        return self._upload(self._session(self.recorder).stop())

    def start_reply(self, voice_id: str) -> None:
        self._require_main()
        self._session(self.reply_recorder).start(voice_id)

    def stop_reply(self) -> str | None:
        """Stop the reply session, attach the clip to its voice and refresh. Returns the reply id."""
        return self._upload(self._session(self.reply_recorder).stop())

    def resend(self) -> list[str]:
        """Retry every clip whose upload failed. Returns the ids created."""
        pending, self.unsent = self.unsent, []
        return [created for created in map(self._upload, pending) if created]

    def _session(self, session: CaptureSession | None) -> CaptureSession:
        if session is None:
            raise RuntimeError("No capture device configured")
        return session

    def _upload(self, recording: Recording) -> str | None:
        """Send a finished clip. A clip lost to a transport failure is kept in ``unsent``."""
        label = "Posting voice" if recording.target is None else "Reply"
        result = None
        try:
            if recording.target is None:
                result = self.api.post_voice(recording.data, recording.filename, recording.mime_type)
            else:
                result = self.api.reply(recording.target, recording.data, recording.filename, recording.mime_type)
        except ApiError as e:
            self._failed(label, e)
        except httpx.HTTPError as e:
            self._failed(label, e)
            self.unsent.append(recording)
        self.refresh()
        return result

    # --- mutations ---

    def like(self, voice_id: str) -> dict[str, Any] | None:
        """Toggle the caller's like and adopt the server's count."""
        self._require_main()
        voice = next((v for v in self.voices if v["id"] == voice_id), None)
        like = not voice["likedByUser"] if voice else True
        try:
            result = self.api.like(voice_id, like)
        except REQUEST_ERRORS as e:
            self._failed("Like", e)
            return None
        with self._lock:
            self.voices = [
                {**v, "likes": result["likes"], "likedByUser": result["likedByUser"]} if v["id"] == voice_id else v
                for v in self.voices
            ]
        self.refresh()
        return result

    def delete(self, voice_id: str) -> bool:
        self._require_main()
        try:
            self.api.delete_voice(voice_id)
        except REQUEST_ERRORS as e:
            self._failed("Delete", e)
            return False
        finally:
            self.refresh()
        return True

    def update_profile(self, city: str | None = None, country: str | None = None) -> bool:
        self._require_main()
        try:
            self.user = self.api.update_profile(city, country)
        except REQUEST_ERRORS as e:
            self._failed("Profile update", e)
            return False
        return True

    def set_profile_picture(self, data: bytes, filename: str, content_type: str = "image/png") -> bool:
        self._require_main()
        try:
            profile_pic = self.api.upload_profile_pic(data, filename, content_type)
        except REQUEST_ERRORS as e:
            self._failed("Profile picture upload", e)
            return False
        self.user = {**(self.user or {}), "profilePic": profile_pic}
        return True

    def _alert(self, label: str, error: Exception) -> None:
        logger.warning("%s failed: %s", label, error)
        self.alerts.append(describe(error))

    def _failed(self, label: str, error: Exception) -> None:
        logger.warning("%s failed: %s", label, error)
        self.notices.append(f"{label} failed: {describe(error)}")
