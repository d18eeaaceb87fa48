from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base
from sacristy.db.models.ordered import OrderedMixin


class Pastoral(OrderedMixin, Base):
    """A pastoral ministry group."""

    __tablename__ = "pastorals"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    coordinator: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
