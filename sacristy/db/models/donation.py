from decimal import Decimal

from sqlalchemy import JSON, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sacristy.db.base import Base

DONATION_STATUSES = ("pending", "processing", "completed", "failed", "canceled", "refunded")


class Donation(Base):
    """Donation attempt recorded by the payment processor webhook."""

    __tablename__ = "donations"

    stripe_session_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    stripe_payment_intent_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="BRL")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    donor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    donor_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    donor_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    donation_purpose: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    extra: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
