# miniofs/management.py
"""
Administrative actions on MinIO file storages.

Meant to be wired to whatever operations surface the application has
(admin endpoint, shell command). Every action returns a status message.
"""
import logging
from typing import Optional

from .locator import FileStorageLocator
from .storage import MinioFileStorage

logger = logging.getLogger(__name__)

REFRESHED = "Refreshed successfully"
IGNORED = "Not a MinIO file storage - refresh attempt ignored"


class MinioFileStorageManagement:
    """Refreshes MinIO storage clients found through a locator"""

    def __init__(self, locator: FileStorageLocator):
        self.locator = locator

    def refresh_minio_client(self, storage_name: Optional[str] = None, **overrides) -> str:
        """
        Rebuild the client of a storage, optionally with new settings.

        Args:
            storage_name: Registered storage name; the default storage if None
            **overrides: Any of access_key, secret_key, region, bucket,
                part_size, endpoint_url. Only the given ones change.

        Returns:
            Status message. Storages of another type are left alone.

        Raises:
            StorageNotFoundError: If no storage has that name
            ConfigurationError: If the resulting settings are invalid
        """
        if storage_name is None:
            storage = self.locator.get_default()
        else:
            storage = self.locator.get_by_name(storage_name)

        if not isinstance(storage, MinioFileStorage):
            logger.info(f"Storage '{storage.storage_name}' is not a MinIO file storage, refresh ignored")
            return IGNORED

        storage.refresh_client(**overrides)
        return REFRESHED
