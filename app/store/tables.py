"""SQLAlchemy tables for the SQL store backend."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UserRow(Base):
    """Application user."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    city = Column(String(128), nullable=False, default="Unknown")
    country = Column(String(128), nullable=False, default="Unknown")
    profile_pic = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class VoiceRow(Base):
    """Voice post. ``seq`` preserves insertion order."""

    __tablename__ = "voice"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    file = Column(String(512), nullable=False)
    city = Column(String(128), nullable=False)
    country = Column(String(128), nullable=False)
    likes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    replies = relationship("ReplyRow", order_by="ReplyRow.seq", cascade="all, delete-orphan")
    like_rows = relationship("VoiceLikeRow", cascade="all, delete-orphan")


class ReplyRow(Base):
    """Audio reply to a voice."""

    __tablename__ = "reply"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    voice_id = Column(String(36), ForeignKey("voice.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False)
    file = Column(String(512), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class VoiceLikeRow(Base):
    """Membership of a user in a voice's liking set."""

    __tablename__ = "voice_like"

    voice_id = Column(String(36), ForeignKey("voice.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("user.id"), primary_key=True)
