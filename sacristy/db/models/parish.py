from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base


class Parish(Base):
    """Parish contact and history information."""

    __tablename__ = "parishes"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    history: Mapped[str] = mapped_column(Text, nullable=False, default="")
    founded_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    image_public_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
