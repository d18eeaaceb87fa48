"""Media upload admin controller."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from litestar import Controller, Request, post
from litestar.datastructures import UploadFile
from litestar.enums import RequestEncodingType
from litestar.params import Body
from litestar.response import Redirect, Response
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.db.services import media_service
from sacristy.entities import ENTITIES
from sacristy.lib.errors import MediaHostError, UploadValidationError
from sacristy.lib.flash import toast_error, toast_success, toast_warning

logger = logging.getLogger(__name__)


class MediaAdminController(Controller):
    """Controller for image uploads outside a specific record's edit form."""

    path = "/admin"

    @post("/media/upload")
    async def upload_media_json(
        self,
        request: Request,
        db_session: AsyncSession,
        data: Annotated[UploadFile, Body(media_type=RequestEncodingType.MULTI_PART)],
        entity: str | None = None,
    ) -> Response:
        """Upload one image and return JSON (used by the edit forms' fetch).

        ``entity`` names the admin tab the image is for, which picks the
        folder and size limit.
        """
        folder, max_bytes = "uploads", media_service.DEFAULT_MAX_BYTES
        schema = ENTITIES.get(entity or "")
        if schema is not None and schema.image is not None:
            folder, max_bytes = schema.image.folder, schema.image.max_bytes

        host = await media_service.resolve_host(db_session, request.app.state.storage_manager)
        try:
            stored = await media_service.upload_media(host, data, folder, max_bytes)
        except UploadValidationError as exc:
            return Response(
                content={"error": str(exc)},
                status_code=400,
                media_type="application/json",
            )
        except MediaHostError as exc:
            logger.warning("Upload of %s failed", data.filename, exc_info=True)
            return Response(
                content={"error": str(exc)},
                status_code=502,
                media_type="application/json",
            )

        return Response(
            content={
                "url": stored.url,
                "public_id": stored.public_id,
                "content_type": stored.content_type,
                "size": stored.size,
            },
            status_code=201,
            media_type="application/json",
        )

    @post("/photos/upload")
    async def bulk_upload_photos(
        self, request: Request, db_session: AsyncSession
    ) -> Redirect:
        """Upload several photos at once, one Photo record per file."""
        form = await request.form()
        uploads = [f for f in form.getall("files") if isinstance(f, UploadFile) and f.filename]
        if not uploads:
            toast_error(request, "Selecione ao menos uma imagem")
            return Redirect(path="/admin/photos")

        album_raw = str(form.get("album_id") or "").strip()
        try:
            album_id = UUID(album_raw) if album_raw else None
        except ValueError:
            toast_error(request, "Álbum inválido")
            return Redirect(path="/admin/photos")

        host = await media_service.resolve_host(db_session, request.app.state.storage_manager)
        result = await media_service.bulk_upload_photos(db_session, host, uploads, album_id)

        if result.succeeded:
            toast_success(request, f"{len(result.succeeded)} foto(s) enviada(s) com sucesso!")
        for outcome in result.failed:
            toast_error(request, "Erro no upload", outcome.message)
        if result.ignored:
            toast_warning(
                request,
                f"Máximo de {media_service.BULK_MAX_FILES} fotos por vez",
                f"Ignoradas: {', '.join(result.ignored)}",
            )
        return Redirect(path="/admin/photos")
