"""Typed settings groups admin controller."""

from __future__ import annotations

import logging
from typing import Annotated

from litestar import Controller, Request, get, post
from litestar.enums import RequestEncodingType
from litestar.exceptions import NotFoundException
from litestar.params import Body
from litestar.response import Redirect, Template as TemplateResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.admin.helpers import get_admin_context
from sacristy.admin.navigation import ADMIN_NAV_TAG
from sacristy.db.services import setting_service
from sacristy.lib import settings_codec
from sacristy.lib.flash import toast_error, toast_success

logger = logging.getLogger(__name__)


def _require_group(group: str) -> None:
    if group not in settings_codec.GROUP_LABELS:
        raise NotFoundException(f"Unknown settings group: {group}")


class SettingsAdminController(Controller):
    """Controller for the settings groups in admin."""

    path = "/admin"

    @get(
        "/settings",
        tags=[ADMIN_NAV_TAG],
        opt={"label": "Configurações", "icon": "settings", "order": 100},
    )
    async def settings_index(self, request: Request) -> TemplateResponse:
        return TemplateResponse(
            "admin/settings/index.html",
            context={"groups": settings_codec.GROUP_LABELS, **get_admin_context(request)},
        )

    @get("/settings/{group:str}")
    async def edit_group(
        self, request: Request, db_session: AsyncSession, group: str
    ) -> TemplateResponse:
        _require_group(group)
        values = await setting_service.get_group(db_session, group)
        return TemplateResponse(
            "admin/settings/group.html",
            context={
                "group": group,
                "group_label": settings_codec.GROUP_LABELS[group],
                "definitions": settings_codec.group_definitions(group),
                "values": settings_codec.mask_secrets(group, values),
                **get_admin_context(request),
            },
        )

    @post("/settings/{group:str}")
    async def save_group(
        self,
        request: Request,
        db_session: AsyncSession,
        group: str,
        data: Annotated[dict, Body(media_type=RequestEncodingType.URL_ENCODED)],
    ) -> Redirect:
        _require_group(group)
        group_path = f"/admin/settings/{group}"

        try:
            values = settings_codec.parse_form(group, data)
        except ValueError as e:
            toast_error(request, "Verifique o formulário", str(e))
            return Redirect(path=group_path)

        try:
            await setting_service.save_group(db_session, group, values)
        except SQLAlchemyError:
            await db_session.rollback()
            logger.warning("Saving settings group %s failed", group, exc_info=True)
            toast_error(request, "Erro ao salvar configurações")
            return Redirect(path=group_path)

        toast_success(request, "Configurações salvas com sucesso!")
        return Redirect(path=group_path)
