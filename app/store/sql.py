"""SQL store backed by a SQLAlchemy session."""

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import DuplicateUser
from app.models.user import User
from app.models.voice import Reply, Voice
from app.store.base import Store, UserStore, VoiceStore
from app.store.tables import ReplyRow, UserRow, VoiceLikeRow, VoiceRow


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back out.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        city=row.city,
        country=row.country,
        profile_pic=row.profile_pic,
        created_at=_aware(row.created_at),
    )


def _to_reply(row: ReplyRow) -> Reply:
    return Reply(id=row.id, user_id=row.user_id, file=row.file, created_at=_aware(row.created_at))


def _to_voice(row: VoiceRow) -> Voice:
    return Voice(
        id=row.id,
        user_id=row.user_id,
        file=row.file,
        city=row.city,
        country=row.country,
        created_at=_aware(row.created_at),
        replies=[_to_reply(r) for r in row.replies],
        liked_by={like.user_id for like in row.like_rows},
        likes=row.likes,
    )


class SqlUserStore(UserStore):
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, user: User) -> User:
        self.db.add(
            UserRow(
                id=user.id,
                email=user.email,
                password_hash=user.password_hash,
                city=user.city,
                country=user.country,
                profile_pic=user.profile_pic,
                created_at=user.created_at,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateUser() from None
        return user

    def get_by_email(self, email: str) -> User | None:
        row = self.db.query(UserRow).filter(UserRow.email == email).first()
        return _to_user(row) if row else None

    def get_by_id(self, user_id: str) -> User | None:
        row = self.db.get(UserRow, user_id)
        return _to_user(row) if row else None

    def update(self, user: User) -> User:
        row = self.db.get(UserRow, user.id)
        if row is None:
            return user
        row.city = user.city
        row.country = user.country
        row.profile_pic = user.profile_pic
        row.password_hash = user.password_hash
        self.db.commit()
        return user


class SqlVoiceStore(VoiceStore):
    def __init__(self, db: Session) -> None:
        self.db = db

    def _row(self, voice_id: str) -> VoiceRow | None:
        return self.db.query(VoiceRow).filter(VoiceRow.id == voice_id).first()

    def append(self, voice: Voice) -> Voice:
        self.db.add(
            VoiceRow(
                id=voice.id,
                user_id=voice.user_id,
                file=voice.file,
                city=voice.city,
                country=voice.country,
                likes=voice.likes,
                created_at=voice.created_at,
            )
        )
        self.db.commit()
        return voice

    def get(self, voice_id: str) -> Voice | None:
        row = self._row(voice_id)
        return _to_voice(row) if row else None

    def list_all(self) -> list[Voice]:
        return [_to_voice(r) for r in self.db.query(VoiceRow).order_by(VoiceRow.seq).all()]

    def list_by_owner(self, user_id: str) -> list[Voice]:
        rows = self.db.query(VoiceRow).filter(VoiceRow.user_id == user_id).order_by(VoiceRow.seq).all()
        return [_to_voice(r) for r in rows]

    def add_reply(self, voice: Voice, reply: Reply) -> Reply:
        self.db.add(
            ReplyRow(
                id=reply.id,
                voice_id=voice.id,
                user_id=reply.user_id,
                file=reply.file,
                created_at=reply.created_at,
            )
        )
        self.db.commit()
        voice.replies.append(reply)
        return reply

    def save_likes(self, voice: Voice) -> Voice:
        row = self._row(voice.id)
        if row is None:
            return voice
        stored = {like.user_id for like in row.like_rows}
        for like in list(row.like_rows):
            if like.user_id not in voice.liked_by:
                row.like_rows.remove(like)
        for user_id in voice.liked_by - stored:
            row.like_rows.append(VoiceLikeRow(voice_id=voice.id, user_id=user_id))
        row.likes = len(voice.liked_by)
        self.db.commit()
        return voice

    def remove(self, voice: Voice) -> None:
        row = self._row(voice.id)
        if row is not None:
            self.db.delete(row)
            self.db.commit()


class SqlStore(Store):
    """Store persisting users and voices through one SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        super().__init__(users=SqlUserStore(db), voices=SqlVoiceStore(db))
