from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base
from sacristy.db.models.ordered import OrderedMixin


class Slide(OrderedMixin, Base):
    """Home page hero slide."""

    __tablename__ = "slides"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
