"""Read-only reporting over donations recorded by the payment webhook."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.db.models import Donation
from sacristy.db.models.donation import DONATION_STATUSES

STATUS_LABELS = {
    "pending": "Pendente",
    "processing": "Processando",
    "completed": "Concluída",
    "failed": "Falhou",
    "canceled": "Cancelada",
    "refunded": "Reembolsada",
}

PERIODS = {
    "all": "Todo o período",
    "today": "Hoje",
    "week": "Últimos 7 dias",
    "month": "Este mês",
    "year": "Este ano",
}

CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "US$", "EUR": "€"}

CSV_HEADER = ["Data", "Valor", "Status", "Doador", "Email", "Telefone", "Finalidade", "Stripe Session ID"]


@dataclass
class DonationTotals:
    total: Decimal
    total_formatted: str
    completed_count: int
    total_attempts: int


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def period_start(period: str, now: datetime | None = None) -> datetime | None:
    """Lower bound on ``created_at`` for a period filter, None for ``all``."""
    now = now or datetime.now(UTC)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period == "all":
        return None
    if period == "today":
        return midnight
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return midnight.replace(day=1)
    if period == "year":
        return midnight.replace(month=1, day=1)
    raise ValueError(f"Unknown period: {period!r}")


async def list_donations(
    db_session: AsyncSession,
    status: str = "all",
    period: str = "all",
    now: datetime | None = None,
) -> list[Donation]:
    """List donations newest first, filtered by status and period.

    Raises:
        ValueError: If ``status`` or ``period`` is not a known filter value.
    """
    query = select(Donation).order_by(Donation.created_at.desc())

    if status != "all":
        if status not in DONATION_STATUSES:
            raise ValueError(f"Unknown donation status: {status!r}")
        query = query.where(Donation.status == status)

    start = period_start(period, now)
    if start is not None:
        query = query.where(Donation.created_at >= start)

    result = await db_session.execute(query)
    return list(result.scalars().all())


def format_currency(amount: Decimal | float | int, currency: str = "BRL") -> str:
    """Format an amount the pt-BR way, e.g. ``R$ 1.234,56``."""
    currency = (currency or "BRL").upper()
    grouped = f"{Decimal(str(amount)):,.2f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol} {localized}"


def calculate_totals(donations: Sequence[Donation]) -> DonationTotals:
    """Sum of completed donations plus completed and overall counts.

    The currency of the first donation is used for formatting.
    """
    completed = [d for d in donations if d.status == "completed"]
    total = sum((Decimal(str(d.amount)) for d in completed), Decimal("0"))
    currency = donations[0].currency if donations else "BRL"
    return DonationTotals(
        total=total,
        total_formatted=format_currency(total, currency),
        completed_count=len(completed),
        total_attempts=len(donations),
    )


def _format_date(value: datetime | date | None) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def export_csv(donations: Iterable[Donation]) -> str:
    """Render donations as CSV text with Portuguese headers and labels."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for d in donations:
        writer.writerow([
            _format_date(d.created_at),
            str(d.amount),
            status_label(d.status),
            d.donor_name or "",
            d.donor_email or "",
            d.donor_phone or "",
            d.donation_purpose or "",
            d.stripe_session_id or "",
        ])
    return buffer.getvalue()


def export_filename(today: date | None = None) -> str:
    today = today or datetime.now(UTC).date()
    return f"doacoes-{today.isoformat()}.csv"
