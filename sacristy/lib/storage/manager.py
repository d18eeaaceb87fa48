"""Storage manager: registry of named media hosts."""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import TYPE_CHECKING

from sacristy.lib.storage.local import LocalMediaHost

if TYPE_CHECKING:
    from sacristy.config import StorageConfig, StoreConfig
    from sacristy.lib.storage.base import MediaHost


class StorageManager:
    """Registry that lazily creates and caches media hosts by store name."""

    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self._hosts: dict[str, MediaHost] = {}

    @property
    def default_store(self) -> str:
        return self._config.default

    @property
    def store_names(self) -> list[str]:
        return list(self._config.stores.keys())

    def store_config(self, name: str | None = None) -> StoreConfig:
        name = name or self._config.default
        store_cfg = self._config.stores.get(name)
        if store_cfg is None:
            raise KeyError(f"Unknown storage store: {name!r}")
        return store_cfg

    def get(self, name: str | None = None) -> MediaHost:
        """Return the host for *name*, creating it on first access."""
        name = name or self._config.default
        if name not in self._hosts:
            self._hosts[name] = create_media_host(self.store_config(name))
        return self._hosts[name]

    def local_mounts(self) -> list[tuple[str, Path]]:
        """(url_prefix, directory) pairs for local stores that need serving."""
        return [
            (cfg.local_url_prefix, Path(cfg.local_path))
            for cfg in self._config.stores.values()
            if cfg.backend == "local"
        ]


def create_media_host(config: StoreConfig) -> MediaHost:
    """Instantiate a media host from configuration."""
    backend_type = config.backend

    if backend_type == "local":
        return LocalMediaHost(
            base_path=Path(config.local_path),
            url_prefix=config.local_url_prefix,
        )

    if backend_type == "s3":
        from sacristy.lib.storage.s3 import S3MediaHost

        return S3MediaHost(config.s3)

    if backend_type == "cloudinary":
        from sacristy.lib.storage.cloudinary import CloudinaryMediaHost

        return CloudinaryMediaHost(config.cloudinary)

    # Dynamic import: "module:ClassName"
    if ":" in backend_type:
        parts = backend_type.split(":")
        if len(parts) != 2:
            raise ValueError(
                f"Invalid backend spec '{backend_type}': must contain exactly one colon"
            )
        module_path, class_name = parts
        module = importlib.import_module(module_path)
        cls = getattr(module, class_name)
        return cls(config)

    raise ValueError(
        f"Unknown media backend '{backend_type}'. "
        "Use 'local', 's3', 'cloudinary', or 'module:ClassName'."
    )
