# miniofs/errors.py
"""Exceptions raised by the MinIO file storage."""
from typing import Optional


class MiniofsError(Exception):
    """Base class for all miniofs errors"""


class ConfigurationError(MiniofsError, ValueError):
    """Storage settings are missing or invalid"""


class FileStorageError(MiniofsError, IOError):
    """
    A storage operation failed.

    Only the file name is kept for diagnostics; the underlying SDK
    exception is logged where it happens and is not attached.
    """

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_name = file_name

    def __str__(self):
        return self.message


class ClientNotInitializedError(FileStorageError):
    """Operation called before the first successful client refresh"""


class StorageNotFoundError(MiniofsError, LookupError):
    """No storage registered under the requested name"""
