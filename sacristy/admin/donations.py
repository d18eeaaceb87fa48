"""Donations admin controller (read-only list and CSV export)."""

from __future__ import annotations

from litestar import Controller, Request, get
from litestar.response import Response, Template as TemplateResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.admin.helpers import get_admin_context
from sacristy.admin.navigation import ADMIN_NAV_TAG
from sacristy.db.models.donation import DONATION_STATUSES
from sacristy.db.services import donation_service


def _filters(request: Request) -> tuple[str, str]:
    status = request.query_params.get("status", "all")
    period = request.query_params.get("period", "all")
    if status != "all" and status not in DONATION_STATUSES:
        status = "all"
    if period not in donation_service.PERIODS:
        period = "all"
    return status, period


class DonationAdminController(Controller):
    """Controller for donation reports."""

    path = "/admin"

    @get(
        "/donations",
        tags=[ADMIN_NAV_TAG],
        opt={"label": "Doações", "icon": "heart", "order": 90},
    )
    async def list_donations(
        self, request: Request, db_session: AsyncSession
    ) -> TemplateResponse:
        status, period = _filters(request)
        donations = await donation_service.list_donations(db_session, status, period)
        return TemplateResponse(
            "admin/donations/list.html",
            context={
                "donations": donations,
                "totals": donation_service.calculate_totals(donations),
                "status": status,
                "period": period,
                "statuses": DONATION_STATUSES,
                "status_labels": donation_service.STATUS_LABELS,
                "periods": donation_service.PERIODS,
                "format_currency": donation_service.format_currency,
                **get_admin_context(request),
            },
        )

    @get("/donations/export.csv")
    async def export_donations(
        self, request: Request, db_session: AsyncSession
    ) -> Response:
        status, period = _filters(request)
        donations = await donation_service.list_donations(db_session, status, period)
        filename = donation_service.export_filename()
        return Response(
            content=donation_service.export_csv(donations),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
