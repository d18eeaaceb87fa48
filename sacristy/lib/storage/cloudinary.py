"""Cloudinary media host using the REST upload API over httpx."""

from __future__ import annotations

import hashlib
import logging
import time
from typing import TYPE_CHECKING

import httpx

from sacristy.lib.errors import MediaHostError
from sacristy.lib.storage.base import StoredMedia

if TYPE_CHECKING:
    from sacristy.config import CloudinaryConfig

logger = logging.getLogger(__name__)

API_BASE = "https://api.cloudinary.com/v1_1"


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Cloudinary request signature: SHA-1 of the sorted params plus the secret."""
    payload = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] != "")
    return hashlib.sha1(f"{payload}{api_secret}".encode()).hexdigest()


class CloudinaryMediaHost:
    """Upload images to a Cloudinary cloud.

    With an API secret uploads are signed; without one the unsigned
    ``upload_preset`` is used.
    """

    def __init__(
        self,
        config: CloudinaryConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not config.cloud_name:
            raise ValueError("Cloudinary media host requires a cloud_name")
        self._config = config
        self._transport = transport

    def _endpoint(self, action: str) -> str:
        return f"{API_BASE}/{self._config.cloud_name}/image/{action}"

    def _signed(self, params: dict[str, str]) -> dict[str, str]:
        params = {**params, "timestamp": str(int(time.time()))}
        params["signature"] = sign_params(params, self._config.api_secret)
        params["api_key"] = self._config.api_key
        return params

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport)

    async def upload(
        self, data: bytes, filename: str, content_type: str, folder: str
    ) -> StoredMedia:
        params: dict[str, str] = {"folder": folder}
        if self._config.api_secret:
            params = self._signed(params)
        else:
            params["upload_preset"] = self._config.upload_preset

        try:
            async with self._client() as client:
                response = await client.post(
                    self._endpoint("upload"),
                    data=params,
                    files={"file": (filename, data, content_type)},
                )
        except httpx.HTTPError as exc:
            raise MediaHostError(f"Cloudinary upload failed: {exc}") from exc

        if response.status_code != 200:
            message = _error_message(response)
            logger.warning("Cloudinary rejected %s: %s", filename, message)
            raise MediaHostError(f"Cloudinary upload failed: {message}")

        body = response.json()
        return StoredMedia(
            url=body["secure_url"],
            public_id=body["public_id"],
            content_type=content_type,
            size=int(body.get("bytes", len(data))),
        )

    async def delete(self, public_id: str) -> None:
        if not self._config.api_secret:
            raise MediaHostError("Deleting Cloudinary images requires an API secret")

        try:
            async with self._client() as client:
                response = await client.post(
                    self._endpoint("destroy"),
                    data=self._signed({"public_id": public_id}),
                )
        except httpx.HTTPError as exc:
            raise MediaHostError(f"Cloudinary delete failed: {exc}") from exc

        if response.status_code != 200:
            raise MediaHostError(f"Cloudinary delete failed: {_error_message(response)}")


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}"
