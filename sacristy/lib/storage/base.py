"""Media host protocol and common types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class StoredMedia:
    """Where an uploaded file ended up.

    ``public_id`` is the host-specific handle needed to delete it later.
    """

    url: str
    public_id: str
    content_type: str = ""
    size: int = 0


@runtime_checkable
class MediaHost(Protocol):
    """Interface for pluggable image hosts.

    Hosts only move bytes. Type and size checks happen before ``upload`` is
    called.
    """

    async def upload(
        self, data: bytes, filename: str, content_type: str, folder: str
    ) -> StoredMedia:
        """Store ``data`` under ``folder`` and return its public location."""
        ...

    async def delete(self, public_id: str) -> None:
        """Remove a previously uploaded file."""
        ...
