"""Admin controller: index only. Entity, settings, donation and media controllers are in separate modules."""

from __future__ import annotations

from litestar import Controller, Request, get
from litestar.response import Template as TemplateResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.admin.helpers import get_admin_context
from sacristy.entities import ENTITIES


class AdminController(Controller):
    """Controller for the admin landing page."""

    path = "/admin"

    @get("/")
    async def admin_index(
        self, request: Request, db_session: AsyncSession
    ) -> TemplateResponse:
        """Dashboard with a record count per tab."""
        counts = {}
        for name, schema in ENTITIES.items():
            result = await db_session.execute(select(func.count()).select_from(schema.model))
            counts[name] = result.scalar_one()

        return TemplateResponse(
            "admin/admin.html",
            context={"entities": ENTITIES, "counts": counts, **get_admin_context(request)},
        )
