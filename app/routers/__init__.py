"""API routers."""

from app.routers.audio import router as audio_router
from app.routers.auth import router as auth_router
from app.routers.users import router as users_router
from app.routers.voices import router as voices_router

__all__ = ["auth_router", "users_router", "voices_router", "audio_router"]
