import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, String, BigInteger, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from filevault.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands timezone-aware columns back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class FileRecord(Base):
    __tablename__ = "file_metadata"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id: Mapped[str] = mapped_column("user_id", ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # storage name of the blob, never shown to other users
    filename: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    public_link_id: Mapped[str | None] = mapped_column(String(36), unique=True, nullable=True)
    public_link_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def link_expired(self, now: datetime) -> bool:
        """True when the share link carries an expiry that is already behind ``now``."""
        if self.public_link_expires_at is None:
            return False
        return as_utc(self.public_link_expires_at) < now
