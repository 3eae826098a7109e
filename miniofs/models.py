# miniofs/models.py
"""
Data models for MinIO file storage.
"""
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional
from urllib.parse import parse_qs, quote

MIN_PART_SIZE = 5 * 1024 * 1024
MAX_PART_SIZE = 5 * 1024 * 1024 * 1024
DEFAULT_PART_SIZE = MIN_PART_SIZE


class CredentialsSource(Enum):
    """Where the client takes its access/secret key pair from"""
    STATIC = "static"
    ENVIRONMENT = "environment"


@dataclass
class MinioSettings:
    """Connection settings for MinIO or Amazon S3"""
    endpoint_url: Optional[str] = None
    bucket: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: Optional[str] = None
    part_size: int = DEFAULT_PART_SIZE  # bytes, 5 MiB..5 GiB inclusive

    @classmethod
    def field_names(cls) -> frozenset:
        return frozenset(f.name for f in fields(cls))

    @property
    def credentials_source(self) -> CredentialsSource:
        if self.access_key is not None and self.secret_key is not None:
            return CredentialsSource.STATIC
        return CredentialsSource.ENVIRONMENT

    def merged(self, **overrides) -> 'MinioSettings':
        """
        Return a copy with the given fields replaced.

        Only the keys present in ``overrides`` change; passing ``None``
        explicitly clears an optional field.

        Raises:
            TypeError: If a key is not a settings field
        """
        unknown = set(overrides) - self.field_names()
        if unknown:
            raise TypeError(f"Unknown settings field(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)


@dataclass(frozen=True)
class FileRef:
    """
    Reference to a file saved in a storage.

    Attributes:
        storage_name: Name of the storage holding the file
        path: Object key generated on save
        file_name: Original file name given by the caller
    """
    storage_name: str
    path: str
    file_name: str

    def to_uri(self) -> str:
        """Serialize as ``<storage>://<path>?name=<file name>``"""
        return f"{self.storage_name}://{self.path}?name={quote(self.file_name, safe='')}"

    @staticmethod
    def from_uri(uri: str) -> 'FileRef':
        """Parse a string produced by :meth:`to_uri`"""
        storage_name, sep, rest = uri.partition('://')
        path, _, query = rest.partition('?')
        names = parse_qs(query).get('name')
        if not sep or not storage_name or not path or not names:
            raise ValueError(f"Cannot convert '{uri}' to FileRef")
        return FileRef(storage_name=storage_name, path=path, file_name=names[0])

    def __str__(self):
        return self.to_uri()
