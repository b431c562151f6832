"""Domain errors raised by services and rendered as JSON ``{"error": ...}`` responses."""


class VoiceAppError(Exception):
    """Base class for errors that map to a 4xx response."""

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingField(VoiceAppError):
    default_message = "Email & password required"


class DuplicateUser(VoiceAppError):
    default_message = "User already exists"


class InvalidCredentials(VoiceAppError):
    default_message = "Invalid credentials"


class NoToken(VoiceAppError):
    status_code = 401
    default_message = "No token"


class InvalidToken(VoiceAppError):
    status_code = 401
    default_message = "Invalid token"


class UserNotFound(VoiceAppError):
    status_code = 404
    default_message = "User not found"


class VoiceNotFound(VoiceAppError):
    status_code = 404
    default_message = "Voice not found"


class NoFileProvided(VoiceAppError):
    default_message = "No file provided"


class UnsupportedMediaType(VoiceAppError):
    default_message = "Unsupported file type"


class FileTooLarge(VoiceAppError):
    status_code = 413
    default_message = "File too large"
