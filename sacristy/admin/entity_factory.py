"""Dynamic controller factory for the per-entity admin tabs."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from litestar import Controller, Request, get, post
from litestar.datastructures import UploadFile
from litestar.enums import RequestEncodingType
from litestar.params import Body
from litestar.response import Redirect, Template as TemplateResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.admin.helpers import extract_entity_form_data, form_values, get_admin_context
from sacristy.admin.navigation import ADMIN_NAV_TAG
from sacristy.db.services import entity_service, media_service
from sacristy.entities import ALBUMS, EntitySchema
from sacristy.lib.errors import (
    EntityNotFoundError,
    FormValidationError,
    MediaHostError,
    ReorderError,
    UploadValidationError,
)
from sacristy.lib.flash import toast_error, toast_success
from sacristy.lib.weekdays import day_label

logger = logging.getLogger(__name__)


async def _discard_media(host, public_id: str) -> None:
    """Delete a stored file, logging instead of failing the request."""
    try:
        await host.delete(public_id)
    except (MediaHostError, ValueError):
        logger.warning("Could not delete image %s", public_id, exc_info=True)


def create_entity_controller(schema: EntitySchema, nav_order: int = 10) -> type[Controller]:
    """Create a Controller subclass for one entity tab.

    Each generated controller:
    - Routes under /admin/{name}
    - Lists, creates, edits and deletes through entity_service
    - Adds toggle, move-up/move-down and image routes when the type has them
    """
    name = schema.name                 # "celebrations"
    label = schema.label               # "Celebração"
    admin_base = f"/admin/{name}"      # "/admin/celebrations"

    async def _template_context(db_session: AsyncSession) -> dict:
        ctx = {
            "schema": schema,
            "admin_base": admin_base,
            "day_label": day_label,
        }
        if schema.get_field("album_id") is not None:
            ctx["albums"] = await entity_service.list_entities(db_session, ALBUMS)
        return ctx

    async def _move(
        request: Request, db_session: AsyncSession, entity_id: UUID, direction: str
    ) -> Redirect:
        try:
            await entity_service.move_entity(db_session, schema, entity_id, direction)
        except EntityNotFoundError:
            toast_error(request, f"{label} não encontrado(a)")
        except ReorderError as e:
            toast_error(request, "Erro ao reordenar", str(e))
        return Redirect(path=admin_base)

    class _EntityController(Controller):
        path = "/admin"

        @get(
            f"/{name}",
            tags=[ADMIN_NAV_TAG],
            opt={"label": schema.label_plural, "icon": schema.icon, "order": nav_order},
        )
        async def list_entities(
            self, request: Request, db_session: AsyncSession
        ) -> TemplateResponse:
            entities = await entity_service.list_entities(db_session, schema)
            return TemplateResponse(
                "admin/entities/list.html",
                context={
                    "entities": entities,
                    **(await _template_context(db_session)),
                    **get_admin_context(request),
                },
            )

        @get(f"/{name}/new")
        async def new_entity(
            self, request: Request, db_session: AsyncSession
        ) -> TemplateResponse:
            return TemplateResponse(
                "admin/entities/edit.html",
                context={
                    "entity": None,
                    "values": form_values(schema, None),
                    **(await _template_context(db_session)),
                    **get_admin_context(request),
                },
            )

        @post(f"/{name}/new")
        async def create_entity(
            self,
            request: Request,
            db_session: AsyncSession,
            data: Annotated[dict, Body(media_type=RequestEncodingType.URL_ENCODED)],
        ) -> Redirect:
            try:
                values = extract_entity_form_data(schema, data)
                entity = await entity_service.create_entity(db_session, schema, values)
            except FormValidationError as e:
                toast_error(request, "Verifique o formulário", str(e))
                return Redirect(path=f"{admin_base}/new")
            except SQLAlchemyError as e:
                await db_session.rollback()
                logger.warning("Creating %s failed", name, exc_info=True)
                toast_error(request, f"Erro ao criar {label.lower()}", str(e.__class__.__name__))
                return Redirect(path=f"{admin_base}/new")

            toast_success(request, f"{label} criado(a) com sucesso!", schema.title_of(entity))
            return Redirect(path=admin_base)

        @get(f"/{name}/{{entity_id:uuid}}/edit")
        async def edit_entity(
            self, request: Request, db_session: AsyncSession, entity_id: UUID
        ) -> TemplateResponse | Redirect:
            entity = await entity_service.get_entity(db_session, schema, entity_id)
            if entity is None:
                toast_error(request, f"{label} não encontrado(a)")
                return Redirect(path=admin_base)

            return TemplateResponse(
                "admin/entities/edit.html",
                context={
                    "entity": entity,
                    "values": form_values(schema, entity),
                    **(await _template_context(db_session)),
                    **get_admin_context(request),
                },
            )

        @post(f"/{name}/{{entity_id:uuid}}/edit")
        async def update_entity(
            self,
            request: Request,
            db_session: AsyncSession,
            entity_id: UUID,
            data: Annotated[dict, Body(media_type=RequestEncodingType.URL_ENCODED)],
        ) -> Redirect:
            try:
                values = extract_entity_form_data(schema, data)
                entity = await entity_service.update_entity(db_session, schema, entity_id, values)
            except EntityNotFoundError:
                toast_error(request, f"{label} não encontrado(a)")
                return Redirect(path=admin_base)
            except FormValidationError as e:
                toast_error(request, "Verifique o formulário", str(e))
                return Redirect(path=f"{admin_base}/{entity_id}/edit")
            except SQLAlchemyError as e:
                await db_session.rollback()
                logger.warning("Updating %s %s failed", name, entity_id, exc_info=True)
                toast_error(request, f"Erro ao atualizar {label.lower()}", str(e.__class__.__name__))
                return Redirect(path=f"{admin_base}/{entity_id}/edit")

            toast_success(request, f"{label} atualizado(a) com sucesso!", schema.title_of(entity))
            return Redirect(path=admin_base)

        @post(f"/{name}/{{entity_id:uuid}}/delete")
        async def delete_entity(
            self, request: Request, db_session: AsyncSession, entity_id: UUID
        ) -> Redirect:
            try:
                entity = await entity_service.delete_entity(db_session, schema, entity_id)
            except EntityNotFoundError:
                toast_error(request, f"{label} não encontrado(a)")
                return Redirect(path=admin_base)
            except SQLAlchemyError:
                await db_session.rollback()
                logger.warning("Deleting %s %s failed", name, entity_id, exc_info=True)
                toast_error(request, f"Erro ao excluir {label.lower()}")
                return Redirect(path=admin_base)

            toast_success(request, f"{label} excluído(a)", schema.title_of(entity))
            return Redirect(path=admin_base)

        if schema.toggle_field is not None:

            @post(f"/{name}/{{entity_id:uuid}}/toggle")
            async def toggle_entity(
                self, request: Request, db_session: AsyncSession, entity_id: UUID
            ) -> Redirect:
                try:
                    value = await entity_service.toggle_flag(db_session, schema, entity_id)
                except EntityNotFoundError:
                    toast_error(request, f"{label} não encontrado(a)")
                    return Redirect(path=admin_base)
                except SQLAlchemyError:
                    await db_session.rollback()
                    logger.warning("Toggling %s %s failed", name, entity_id, exc_info=True)
                    toast_error(request, "Erro ao alterar status")
                    return Redirect(path=admin_base)

                toast_success(request, "Ativado(a)" if value else "Desativado(a)")
                return Redirect(path=admin_base)

        if schema.ordered:

            @post(f"/{name}/{{entity_id:uuid}}/move-up")
            async def move_up(
                self, request: Request, db_session: AsyncSession, entity_id: UUID
            ) -> Redirect:
                return await _move(request, db_session, entity_id, "up")

            @post(f"/{name}/{{entity_id:uuid}}/move-down")
            async def move_down(
                self, request: Request, db_session: AsyncSession, entity_id: UUID
            ) -> Redirect:
                return await _move(request, db_session, entity_id, "down")

        if schema.image is not None:

            @post(f"/{name}/{{entity_id:uuid}}/image")
            async def upload_image(
                self,
                request: Request,
                db_session: AsyncSession,
                entity_id: UUID,
                data: Annotated[UploadFile, Body(media_type=RequestEncodingType.MULTI_PART)],
            ) -> Redirect:
                edit_path = f"{admin_base}/{entity_id}/edit"
                if await entity_service.get_entity(db_session, schema, entity_id) is None:
                    toast_error(request, f"{label} não encontrado(a)")
                    return Redirect(path=admin_base)

                host = await media_service.resolve_host(db_session, request.app.state.storage_manager)
                try:
                    stored = await media_service.upload_media(
                        host, data, schema.image.folder, schema.image.max_bytes
                    )
                except (UploadValidationError, MediaHostError) as e:
                    toast_error(request, "Erro no upload", str(e))
                    return Redirect(path=edit_path)

                try:
                    _, previous = await entity_service.set_image(
                        db_session, schema, entity_id, stored.url, stored.public_id
                    )
                except SQLAlchemyError:
                    await db_session.rollback()
                    logger.warning("Saving image of %s %s failed", name, entity_id, exc_info=True)
                    toast_error(request, "Erro ao salvar imagem")
                    # The record does not reference the new file, so drop it.
                    await _discard_media(host, stored.public_id)
                    return Redirect(path=edit_path)

                if previous and previous != stored.public_id:
                    await _discard_media(host, previous)

                toast_success(request, "Imagem enviada com sucesso!")
                return Redirect(path=edit_path)

    # Give the class a unique name for Litestar's route registration
    class_name = f"{name.title()}AdminController"
    _EntityController.__name__ = class_name
    _EntityController.__qualname__ = class_name

    return _EntityController
