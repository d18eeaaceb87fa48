from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base
from sacristy.db.models.ordered import OrderedMixin


class PhotoAlbum(OrderedMixin, Base):
    """Named group of gallery photos."""

    __tablename__ = "photo_albums"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cover_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
