"""User model."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

DEFAULT_LOCATION = "Unknown"


@dataclass
class User:
    """Application user. Keyed by email in the store."""

    email: str
    password_hash: str
    city: str = DEFAULT_LOCATION
    country: str = DEFAULT_LOCATION
    profile_pic: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
