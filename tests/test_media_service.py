"""Tests for upload validation and bulk photo uploads."""

from unittest.mock import AsyncMock

import pytest

from sacristy.config import StorageConfig, StoreConfig
from sacristy.db.services import entity_service, setting_service
from sacristy.db.services.media_service import (
    BULK_MAX_FILES,
    bulk_upload_photos,
    format_size,
    photo_title,
    resolve_host,
    upload_media,
    validate_upload,
)
from sacristy.entities import ALBUMS, MB, PHOTOS
from sacristy.lib.errors import MediaHostError, UploadValidationError
from sacristy.lib.storage import StorageManager, StoredMedia
from sacristy.lib.storage.cloudinary import CloudinaryMediaHost
from sacristy.lib.storage.local import LocalMediaHost


def _host():
    host = AsyncMock()

    async def _upload(data, filename, content_type, folder):
        return StoredMedia(url=f"/uploads/{folder}/{filename}", public_id=f"{folder}/{filename}")

    host.upload.side_effect = _upload
    return host


class TestValidateUpload:
    def test_accepts_image_within_limit(self):
        validate_upload("a.jpg", "image/jpeg", 5 * MB, 5 * MB)

    def test_rejects_non_image(self):
        with pytest.raises(UploadValidationError, match="apenas imagens"):
            validate_upload("doc.pdf", "application/pdf", 10, 5 * MB)

    def test_rejects_oversized(self):
        with pytest.raises(UploadValidationError, match="máximo 10MB"):
            validate_upload("big.png", "image/png", 15 * MB, 10 * MB)

    def test_format_size(self):
        assert format_size(1 * MB) == "1MB"
        assert format_size(512 * 1024) == "512KB"


class TestUploadMedia:
    @pytest.mark.asyncio
    async def test_oversized_file_never_reaches_host(self, make_upload):
        host = _host()

        with pytest.raises(UploadValidationError):
            await upload_media(host, make_upload("slide.jpg", size=15 * MB), "slides", 10 * MB)

        host.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_image_never_reaches_host(self, make_upload):
        host = _host()

        with pytest.raises(UploadValidationError):
            await upload_media(host, make_upload("notes.txt", "text/plain"), "slides")

        host.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_file_is_uploaded_to_folder(self, make_upload):
        host = _host()

        stored = await upload_media(host, make_upload("slide.jpg"), "slides")

        assert stored.public_id == "slides/slide.jpg"
        host.upload.assert_awaited_once()
        args = host.upload.await_args.args
        assert args[1:] == ("slide.jpg", "image/jpeg", "slides")
        assert len(args[0]) == 1024


class TestBulkUpload:
    @pytest.mark.asyncio
    async def test_each_file_gets_its_own_outcome(self, db_session, make_upload):
        host = _host()
        uploads = [
            make_upload("missa.jpg"),
            make_upload("grande.jpg", size=2 * MB),
            make_upload("ata.pdf", "application/pdf"),
            make_upload("festa.png", "image/png"),
        ]

        result = await bulk_upload_photos(db_session, host, uploads)

        assert [o.filename for o in result.succeeded] == ["missa.jpg", "festa.png"]
        assert [o.filename for o in result.failed] == ["grande.jpg", "ata.pdf"]
        assert result.ignored == []

        photos = await entity_service.list_entities(db_session, PHOTOS)
        assert sorted(p.title for p in photos) == ["festa", "missa"]
        assert {p.category for p in photos} == {"community"}

    @pytest.mark.asyncio
    async def test_files_beyond_limit_are_ignored(self, db_session, make_upload):
        host = _host()
        uploads = [make_upload(f"foto{i}.jpg") for i in range(12)]

        result = await bulk_upload_photos(db_session, host, uploads)

        assert len(result.succeeded) == BULK_MAX_FILES
        assert result.ignored == ["foto10.jpg", "foto11.jpg"]
        assert host.upload.await_count == BULK_MAX_FILES

    @pytest.mark.asyncio
    async def test_host_failure_does_not_stop_batch(self, db_session, make_upload):
        host = AsyncMock()
        host.upload.side_effect = [
            StoredMedia(url="/a.jpg", public_id="photos/a.jpg"),
            MediaHostError("Cloudinary upload failed: quota"),
            StoredMedia(url="/c.jpg", public_id="photos/c.jpg"),
        ]
        uploads = [make_upload("a.jpg"), make_upload("b.jpg"), make_upload("c.jpg")]

        result = await bulk_upload_photos(db_session, host, uploads)

        assert [o.ok for o in result.outcomes] == [True, False, True]
        assert "quota" in result.failed[0].message
        assert len(await entity_service.list_entities(db_session, PHOTOS)) == 2

    @pytest.mark.asyncio
    async def test_photos_are_linked_to_album(self, db_session, make_upload):
        album = await entity_service.create_entity(db_session, ALBUMS, {"name": "Crisma"})

        result = await bulk_upload_photos(
            db_session, _host(), [make_upload("crisma.jpg")], album_id=album.id
        )

        assert result.succeeded[0].entity.album_id == album.id

    @pytest.mark.asyncio
    async def test_unwritable_local_host_reports_each_file(self, db_session, make_upload, tmp_path):
        blocker = tmp_path / "uploads"
        blocker.write_text("not a directory")
        host = LocalMediaHost(blocker)

        result = await bulk_upload_photos(
            db_session, host, [make_upload("a.jpg"), make_upload("b.jpg")]
        )

        assert [o.filename for o in result.failed] == ["a.jpg", "b.jpg"]
        assert all("Local upload failed" in o.message for o in result.failed)
        assert result.succeeded == []
        assert await entity_service.list_entities(db_session, PHOTOS) == []

    def test_photo_title_strips_extension(self):
        assert photo_title("Primeira Comunhão.JPG") == "Primeira Comunhão"


class TestResolveHost:
    def _storage(self, tmp_path):
        config = StorageConfig(stores={"default": StoreConfig(local_path=str(tmp_path))})
        return StorageManager(config)

    @pytest.mark.asyncio
    async def test_default_store_without_cloudinary_settings(self, db_session, tmp_path):
        host = await resolve_host(db_session, self._storage(tmp_path))
        assert isinstance(host, LocalMediaHost)

    @pytest.mark.asyncio
    async def test_enabled_cloudinary_settings_take_precedence(self, db_session, tmp_path):
        await setting_service.save_group(db_session, "cloudinary", {
            "cloudinary_enabled": True,
            "cloudinary_cloud_name": "paroquia",
        })

        host = await resolve_host(db_session, self._storage(tmp_path))

        assert isinstance(host, CloudinaryMediaHost)

    @pytest.mark.asyncio
    async def test_disabled_cloudinary_is_ignored(self, db_session, tmp_path):
        await setting_service.save_group(db_session, "cloudinary", {
            "cloudinary_enabled": False,
            "cloudinary_cloud_name": "paroquia",
        })

        host = await resolve_host(db_session, self._storage(tmp_path))

        assert isinstance(host, LocalMediaHost)
