from uuid import UUID

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base

PHOTO_CATEGORIES = ("history", "events", "celebrations", "community")


class Photo(Base):
    """Gallery photo, optionally attached to an album."""

    __tablename__ = "photos"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="community", index=True)
    album_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("photo_albums.id", ondelete="SET NULL"), nullable=True, index=True
    )
