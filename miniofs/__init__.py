"""
MinIO / Amazon S3 backed file storage.

Saves streams under date-partitioned random keys and hands back FileRef
objects for later open/remove/exists calls. The underlying client can be
rebuilt at runtime without disturbing operations in flight.
"""
from .errors import (
    ClientNotInitializedError,
    ConfigurationError,
    FileStorageError,
    MiniofsError,
    StorageNotFoundError,
)
from .locator import FileStorageLocator
from .management import MinioFileStorageManagement
from .models import CredentialsSource, FileRef, MinioSettings
from .storage import FileStorage, MinioFileStorage

__all__ = [
    'ClientNotInitializedError',
    'ConfigurationError',
    'CredentialsSource',
    'FileRef',
    'FileStorage',
    'FileStorageError',
    'FileStorageLocator',
    'MiniofsError',
    'MinioFileStorage',
    'MinioFileStorageManagement',
    'MinioSettings',
    'StorageNotFoundError',
]
