from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base


class Priest(Base):
    """Member of the clergy shown on the site."""

    __tablename__ = "priests"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    photo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
    short_bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    full_bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    ordination_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parish_since: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
