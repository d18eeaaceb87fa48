from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base


class Setting(Base):
    """Flat key/value site setting. Values are always stored as strings."""

    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
