from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base


class UrgentPopup(Base):
    """Announcement popup; the active one with the highest priority wins."""

    __tablename__ = "urgent_popups"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
    link_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    link_text: Mapped[str] = mapped_column(String(255), nullable=False, default="Saiba mais")
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=1, nullable=False, index=True)
    auto_close_seconds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
