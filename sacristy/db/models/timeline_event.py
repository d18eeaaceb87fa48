from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base


class TimelineEvent(Base):
    """Milestone in the parish history timeline."""

    __tablename__ = "timeline_events"

    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
