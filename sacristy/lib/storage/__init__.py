from sacristy.lib.storage.base import MediaHost, StoredMedia
from sacristy.lib.storage.manager import StorageManager, create_media_host

__all__ = ["MediaHost", "StorageManager", "StoredMedia", "create_media_host"]
