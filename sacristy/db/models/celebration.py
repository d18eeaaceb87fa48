from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base
from sacristy.db.models.ordered import OrderedMixin


class Celebration(OrderedMixin, Base):
    """A recurring mass or celebration, ordered within its day of the week."""

    __tablename__ = "celebrations"

    community_name: Mapped[str] = mapped_column(String(255), nullable=False)
    celebrant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    celebration_type: Mapped[str] = mapped_column(String(50), nullable=False, default="Missa")
    time: Mapped[str] = mapped_column(String(20), nullable=False)

    # Partition key for ordering
    day_of_week: Mapped[str] = mapped_column(String(20), nullable=False, default="sunday", index=True)
