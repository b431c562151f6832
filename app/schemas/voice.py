"""Pydantic schemas for voice endpoints."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.user import CamelModel, UserPublic


class ReplyResponse(CamelModel):
    id: str
    user_id: str
    audio_url: str
    created_at: datetime
    user: UserPublic | None = None


class FeedVoiceResponse(CamelModel):
    id: str
    user_id: str
    file: str
    audio_url: str
    city: str
    country: str
    created_at: datetime
    likes: int
    liked_by_user: bool
    user: UserPublic | None = None
    replies: list[ReplyResponse] = []


class MyVoiceResponse(CamelModel):
    id: str
    audio_url: str
    city: str
    country: str
    created_at: datetime
    likes: int
    replies: list[ReplyResponse] = []


class LikeRequest(BaseModel):
    like: bool = False


class LikeResponse(CamelModel):
    likes: int
    liked_by_user: bool


class SuccessResponse(CamelModel):
    success: bool = True
    id: str | None = None
