"""S3-compatible media host (requires ``pip install sacristy[s3]``)."""

from __future__ import annotations

import uuid
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

try:
    import aioboto3
    from botocore.exceptions import BotoCoreError, ClientError
except ImportError as exc:
    raise ImportError(
        "S3 media host requires aioboto3. Install it with: pip install sacristy[s3]"
    ) from exc

from sacristy.lib.errors import MediaHostError
from sacristy.lib.storage.base import StoredMedia

if TYPE_CHECKING:
    from sacristy.config import S3Config


class S3MediaHost:
    """Store uploads as public objects in an S3-compatible bucket."""

    def __init__(self, config: S3Config) -> None:
        self._config = config
        self._session = aioboto3.Session()

    def _client_kwargs(self) -> dict:
        kwargs: dict = {
            "region_name": self._config.region,
        }
        if self._config.endpoint_url:
            kwargs["endpoint_url"] = self._config.endpoint_url
        if self._config.access_key_id:
            kwargs["aws_access_key_id"] = self._config.access_key_id
        if self._config.secret_access_key:
            kwargs["aws_secret_access_key"] = self._config.secret_access_key
        return kwargs

    def _full_key(self, folder: str, filename: str) -> str:
        suffix = PurePosixPath(filename).suffix.lower()
        parts = [self._config.prefix.strip("/"), folder.strip("/"), f"{uuid.uuid4().hex}{suffix}"]
        return "/".join(p for p in parts if p)

    def _public_url(self, key: str) -> str:
        if self._config.public_url:
            return f"{self._config.public_url.rstrip('/')}/{key}"
        if self._config.endpoint_url:
            return f"{self._config.endpoint_url.rstrip('/')}/{self._config.bucket}/{key}"
        return f"https://{self._config.bucket}.s3.{self._config.region}.amazonaws.com/{key}"

    async def upload(
        self, data: bytes, filename: str, content_type: str, folder: str
    ) -> StoredMedia:
        key = self._full_key(folder, filename)
        try:
            async with self._session.client("s3", **self._client_kwargs()) as s3:
                await s3.put_object(
                    Bucket=self._config.bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                )
        except (BotoCoreError, ClientError) as exc:
            raise MediaHostError(f"S3 upload failed: {exc}") from exc
        return StoredMedia(
            url=self._public_url(key),
            public_id=key,
            content_type=content_type,
            size=len(data),
        )

    async def delete(self, public_id: str) -> None:
        try:
            async with self._session.client("s3", **self._client_kwargs()) as s3:
                await s3.delete_object(Bucket=self._config.bucket, Key=public_id)
        except (BotoCoreError, ClientError) as exc:
            raise MediaHostError(f"S3 delete failed: {exc}") from exc
