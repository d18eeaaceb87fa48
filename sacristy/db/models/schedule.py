from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base


class Schedule(Base):
    """Office/celebration hours entry for a day of the week."""

    __tablename__ = "schedules"

    day_of_week: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
