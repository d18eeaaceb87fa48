"""Image upload validation and dispatch to the active media host."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING, Any, Protocol, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.config import CloudinaryConfig
from sacristy.db.services import entity_service, setting_service
from sacristy.entities import MB, PHOTOS
from sacristy.lib.errors import MediaHostError, UploadValidationError
from sacristy.lib.storage.base import MediaHost, StoredMedia
from sacristy.lib.storage.cloudinary import CloudinaryMediaHost

if TYPE_CHECKING:
    from sacristy.lib.storage.manager import StorageManager

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 5 * MB
BULK_MAX_FILES = 10
BULK_MAX_BYTES = 1 * MB
BULK_FOLDER = "photos"
BULK_CATEGORY = "community"


class Upload(Protocol):
    """The parts of ``litestar.datastructures.UploadFile`` used here."""

    filename: str
    content_type: str

    async def read(self, size: int = -1) -> bytes: ...


@dataclass
class FileOutcome:
    filename: str
    ok: bool
    message: str = ""
    entity: Any = None


@dataclass
class BulkUploadResult:
    outcomes: list[FileOutcome] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if not o.ok]


def format_size(num_bytes: int) -> str:
    if num_bytes >= MB:
        return f"{num_bytes / MB:g}MB"
    return f"{num_bytes / 1024:g}KB"


def validate_upload(filename: str, content_type: str, size: int, max_bytes: int) -> None:
    """Check type and size locally.

    Raises:
        UploadValidationError: If the file is not an image or is too large.
    """
    if not (content_type or "").startswith("image/"):
        raise UploadValidationError(f"{filename}: apenas imagens são permitidas")
    if size > max_bytes:
        raise UploadValidationError(
            f"{filename}: arquivo muito grande ({format_size(size)}), "
            f"máximo {format_size(max_bytes)}"
        )


async def resolve_host(db_session: AsyncSession, storage: StorageManager) -> MediaHost:
    """Pick the media host for uploads.

    Cloudinary credentials saved in the admin settings take precedence over
    the configured default store.
    """
    cloudinary = await setting_service.get_group(db_session, "cloudinary")
    if cloudinary["cloudinary_enabled"] and cloudinary["cloudinary_cloud_name"]:
        return CloudinaryMediaHost(
            CloudinaryConfig(
                cloud_name=cloudinary["cloudinary_cloud_name"],
                api_key=cloudinary["cloudinary_api_key"],
                api_secret=cloudinary["cloudinary_api_secret"],
                upload_preset=cloudinary["cloudinary_upload_preset"],
            )
        )
    return storage.get()


async def upload_media(
    host: MediaHost,
    upload: Upload,
    folder: str,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> StoredMedia:
    """Validate one file and send it to the host.

    Raises:
        UploadValidationError: Before contacting the host, on bad type or size.
        MediaHostError: If the host fails.
    """
    data = await upload.read()
    validate_upload(upload.filename, upload.content_type, len(data), max_bytes)
    return await host.upload(data, upload.filename, upload.content_type, folder)


def photo_title(filename: str) -> str:
    """File name without its extension."""
    return PurePath(filename).stem or filename


async def bulk_upload_photos(
    db_session: AsyncSession,
    host: MediaHost,
    uploads: Sequence[Upload],
    album_id: UUID | None = None,
) -> BulkUploadResult:
    """Upload up to ``BULK_MAX_FILES`` photos one after another.

    Each file gets its own outcome; a failure doesn't stop the batch and
    photos saved before it stay saved.
    """
    result = BulkUploadResult(ignored=[u.filename for u in uploads[BULK_MAX_FILES:]])

    for upload in uploads[:BULK_MAX_FILES]:
        try:
            stored = await upload_media(host, upload, BULK_FOLDER, BULK_MAX_BYTES)
        except (UploadValidationError, MediaHostError) as exc:
            result.outcomes.append(FileOutcome(upload.filename, ok=False, message=str(exc)))
            continue

        try:
            photo = await entity_service.create_entity(
                db_session,
                PHOTOS,
                {
                    "title": photo_title(upload.filename),
                    "image_url": stored.url,
                    "image_public_id": stored.public_id,
                    "category": BULK_CATEGORY,
                    "album_id": album_id,
                },
            )
        except SQLAlchemyError:
            await db_session.rollback()
            logger.warning("Saving photo %s failed", upload.filename, exc_info=True)
            result.outcomes.append(
                FileOutcome(upload.filename, ok=False, message=f"{upload.filename}: erro ao salvar")
            )
            continue

        result.outcomes.append(FileOutcome(upload.filename, ok=True, entity=photo))

    return result
