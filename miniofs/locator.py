# miniofs/locator.py
"""Lookup of file storages by name"""
import logging
from typing import Dict, Optional

from .errors import StorageNotFoundError
from .storage import FileStorage

logger = logging.getLogger(__name__)


class FileStorageLocator:
    """
    Registry of the file storages an application uses.

    The first registered storage is the default unless another one is
    registered with ``default=True``.
    """

    def __init__(self):
        self._storages: Dict[str, FileStorage] = {}
        self._default_name: Optional[str] = None

    def register(self, storage: FileStorage, default: bool = False) -> None:
        name = storage.storage_name
        if name in self._storages:
            logger.warning(f"Replacing file storage registered as '{name}'")
        self._storages[name] = storage
        if default or self._default_name is None:
            self._default_name = name
        logger.debug(f"Registered file storage '{name}' (default={self._default_name == name})")

    def get_by_name(self, storage_name: str) -> FileStorage:
        try:
            return self._storages[storage_name]
        except KeyError:
            raise StorageNotFoundError(f"No file storage registered as '{storage_name}'") from None

    def get_default(self) -> FileStorage:
        if self._default_name is None:
            raise StorageNotFoundError("No file storage registered")
        return self._storages[self._default_name]

    def __contains__(self, storage_name: str) -> bool:
        return storage_name in self._storages
