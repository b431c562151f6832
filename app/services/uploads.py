"""Upload handler: validates and streams multipart files into the content directory."""

import os
import re
import time
import uuid
from pathlib import Path

from fastapi import UploadFile

from app.config import get_settings
from app.errors import FileTooLarge, NoFileProvided, UnsupportedMediaType

AUDIO_FIELD = "audio"
PROFILE_PIC_FIELD = "profilePic"

# MediaRecorder blobs arrive without a filename and some browsers label
# recordings as video containers.
ALLOWED_AUDIO_TYPES = {"video/webm", "video/mp4", "application/octet-stream"}
ALLOWED_IMAGE_TYPES = {"application/octet-stream"}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(name: str | None) -> str:
    """Strip directory parts and unsafe characters from a client supplied name."""
    base = Path(name or "").name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "blob"


class UploadService:
    """Stores uploaded audio clips and profile pictures."""

    @property
    def upload_dir(self) -> Path:
        return Path(get_settings().UPLOAD_DIR)

    def validate_content_type(self, field: str, content_type: str | None) -> None:
        """Raise UnsupportedMediaType if the declared type does not fit the field."""
        if not content_type:
            return
        content_type = content_type.split(";")[0].strip().lower()
        if field == PROFILE_PIC_FIELD:
            if content_type.startswith("image/") or content_type in ALLOWED_IMAGE_TYPES:
                return
            raise UnsupportedMediaType(f"Invalid content type '{content_type}'. Must be an image.")
        if content_type.startswith("audio/") or content_type in ALLOWED_AUDIO_TYPES:
            return
        raise UnsupportedMediaType(f"Invalid content type '{content_type}'. Must be an audio file.")

    async def store_file(self, field: str, upload: UploadFile | None) -> str:
        """Stream ``upload`` to disk and return the generated filename.

        Raises NoFileProvided, UnsupportedMediaType or FileTooLarge.
        """
        if upload is None:
            raise NoFileProvided(f"No file provided in '{field}' field")
        self.validate_content_type(field, upload.content_type)

        settings = get_settings()
        max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
        stored_filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{sanitize_filename(upload.filename)}"
        self.upload_dir.mkdir(parents=True, exist_ok=True)

        file_path = self.upload_dir / stored_filename
        file_size = 0
        chunk_size = 1024 * 64  # 64KB chunks

        try:
            with open(file_path, "wb") as f:
                while True:
                    chunk = await upload.read(chunk_size)
                    if not chunk:
                        break
                    file_size += len(chunk)
                    if file_size > max_bytes:
                        raise FileTooLarge(f"File too large. Maximum: {settings.MAX_UPLOAD_SIZE_MB}MB")
                    f.write(chunk)
        except FileTooLarge:
            if file_path.exists():
                os.remove(file_path)
            raise

        return stored_filename

    def resolve(self, filename: str) -> Path | None:
        """Return the path of a stored file, or None if it is missing or outside the content directory."""
        root = self.upload_dir.resolve()
        path = (root / filename).resolve()
        if path.parent != root or not path.is_file():
            return None
        return path

    def delete_file(self, filename: str) -> None:
        """Remove a stored file if it exists."""
        path = self.resolve(filename)
        if path is not None:
            os.remove(path)


_upload_service: UploadService | None = None


def get_upload_service() -> UploadService:
    """Get singleton upload service instance."""
    global _upload_service
    if _upload_service is None:
        _upload_service = UploadService()
    return _upload_service
