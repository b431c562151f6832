"""Audio capture sessions.

A session owns the capture device from ``start`` until ``stop``. Each session
is a single slot: starting it again while it records raises ``SessionBusy``.
"""

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol


class SessionBusy(Exception):
    """A capture session is already recording."""


class CaptureStream(Protocol):
    def read_chunk(self) -> bytes:
        """Return the next buffered chunk, or b"" when nothing is pending."""

    def close(self) -> None: ...


class CaptureDevice(Protocol):
    mime_type: str

    def open(self) -> CaptureStream: ...


class SessionState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"


@dataclass
class Recording:
    """Audio captured by one session."""

    target: str | None
    data: bytes
    mime_type: str

    @property
    def filename(self) -> str:
        ext = mimetypes.guess_extension(self.mime_type) or ".webm"
        return f"recording{ext}"


class CaptureSession:
    """idle -> recording (device acquired, chunks buffered) -> idle (chunks joined)."""

    def __init__(self, device: CaptureDevice) -> None:
        self.device = device
        self.state = SessionState.IDLE
        self.target: str | None = None
        self._stream: CaptureStream | None = None
        self._chunks: list[bytes] = []

    @property
    def active(self) -> bool:
        return self.state is SessionState.RECORDING

    def start(self, target: str | None = None) -> None:
        if self.active:
            raise SessionBusy(f"Already recording for {self.target or 'a new voice'}")
        self._stream = self.device.open()
        self._chunks = []
        self.target = target
        self.state = SessionState.RECORDING

    def pump(self) -> int:
        """Move every pending chunk from the device into the buffer. Returns the number moved."""
        if not self.active or self._stream is None:
            return 0
        moved = 0
        while chunk := self._stream.read_chunk():
            self._chunks.append(chunk)
            moved += 1
        return moved

    def stop(self) -> Recording:
        """Release the device and return everything captured."""
        if not self.active:
            raise RuntimeError("No recording in progress")
        self.pump()
        recording = Recording(target=self.target, data=b"".join(self._chunks), mime_type=self.device.mime_type)
        self._release()
        return recording

    def cancel(self) -> None:
        """Release the device and discard buffered audio."""
        if self.active:
            self._release()

    def _release(self) -> None:
        if self._stream is not None:
            self._stream.close()
        self._stream = None
        self._chunks = []
        self.target = None
        self.state = SessionState.IDLE


class _FileStream:
    def __init__(self, path: Path, chunk_size: int) -> None:
        self._file = open(path, "rb")
        self._chunk_size = chunk_size

    def read_chunk(self) -> bytes:
        return self._file.read(self._chunk_size)

    def close(self) -> None:
        self._file.close()


class FileCaptureDevice:
    """Plays an existing audio file into a session in fixed size chunks."""

    def __init__(self, path: str | Path, chunk_size: int = 1024 * 64) -> None:
        self.path = Path(path)
        self.chunk_size = chunk_size
        self.mime_type = mimetypes.guess_type(self.path.name)[0] or "application/octet-stream"

    def open(self) -> _FileStream:
        return _FileStream(self.path, self.chunk_size)
