"""Local filesystem media host."""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path, PurePosixPath

from sacristy.lib.errors import MediaHostError
from sacristy.lib.storage.base import StoredMedia


class LocalMediaHost:
    """Write uploads under ``base_path/<folder>/`` and serve them from ``url_prefix``."""

    def __init__(self, base_path: Path, url_prefix: str = "/uploads") -> None:
        self._base_path = base_path
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def base_path(self) -> Path:
        return self._base_path

    async def upload(
        self, data: bytes, filename: str, content_type: str, folder: str
    ) -> StoredMedia:
        public_id = self._make_key(filename, folder)
        path = self._key_to_path(public_id)
        try:
            await asyncio.to_thread(self._write_file, path, data)
        except OSError as exc:
            raise MediaHostError(f"Local upload failed: {exc}") from exc
        return StoredMedia(
            url=f"{self._url_prefix}/{public_id}",
            public_id=public_id,
            content_type=content_type,
            size=len(data),
        )

    async def delete(self, public_id: str) -> None:
        path = self._key_to_path(public_id)
        try:
            await asyncio.to_thread(self._unlink, path)
        except OSError as exc:
            raise MediaHostError(f"Local delete failed: {exc}") from exc

    # -- internal helpers --

    @staticmethod
    def _make_key(filename: str, folder: str) -> str:
        suffix = PurePosixPath(filename).suffix.lower()
        name = f"{uuid.uuid4().hex}{suffix}"
        folder = folder.strip("/")
        return f"{folder}/{name}" if folder else name

    def _key_to_path(self, key: str) -> Path:
        path = (self._base_path / key).resolve()
        if not path.is_relative_to(self._base_path.resolve()):
            raise ValueError(f"Media key escapes the upload directory: {key!r}")
        return path

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    @staticmethod
    def _unlink(path: Path) -> None:
        path.unlink(missing_ok=True)
