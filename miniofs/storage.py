# miniofs/storage.py
"""
MinIO-backed file storage.
Works with MinIO, AWS S3 and other S3-compatible storage.
"""
import io
import logging
import mimetypes
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Callable, Optional, Protocol, Tuple, Union, runtime_checkable

from minio import Minio
from minio.credentials import EnvMinioProvider, StaticProvider
from minio.error import S3Error

from . import config
from .errors import ClientNotInitializedError, ConfigurationError, FileStorageError
from .keys import create_file_key
from .models import MAX_PART_SIZE, MIN_PART_SIZE, CredentialsSource, FileRef, MinioSettings

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_NAME = 'minio'

# stat_object error codes meaning "not there" rather than "failed"
NOT_FOUND_CODES = frozenset({'NoSuchBucket', 'NoSuchKey'})


@runtime_checkable
class FileStorage(Protocol):
    """Operations every file storage registered in a locator provides"""

    @property
    def storage_name(self) -> str:
        ...

    def save(self, file_name: str, data: Union[BinaryIO, bytes]) -> FileRef:
        ...

    def open(self, ref: FileRef) -> BinaryIO:
        ...

    def remove(self, ref: FileRef) -> None:
        ...

    def exists(self, ref: FileRef) -> bool:
        ...


@dataclass(frozen=True)
class _Connection:
    """Client plus the settings it was built for, published as one unit"""
    client: Minio
    bucket: str
    part_size: int
    credentials_source: CredentialsSource


def parse_endpoint(endpoint_url: str) -> Tuple[str, bool]:
    """
    Split an endpoint URL into the SDK's host and TLS flag.

    'http://minio:9000' -> ('minio:9000', False)
    'https://s3.amazonaws.com' -> ('s3.amazonaws.com', True)
    'play.min.io' -> ('play.min.io', True)
    """
    if '://' not in endpoint_url:
        host, secure = endpoint_url, True
    else:
        scheme, _, rest = endpoint_url.partition('://')
        scheme = scheme.lower()
        if scheme not in ('http', 'https'):
            raise ConfigurationError(f"endpoint_url scheme must be http or https: {endpoint_url}")
        host, secure = rest, scheme == 'https'
    host = host.rstrip('/')
    if not host or '/' in host:
        raise ConfigurationError(f"endpoint_url must be scheme://host[:port]: {endpoint_url}")
    return host, secure


def validate_settings(settings: MinioSettings) -> None:
    """Raise ConfigurationError unless the settings can build a client"""
    if not settings.endpoint_url:
        raise ConfigurationError("endpoint_url must not be empty")
    if not settings.bucket:
        raise ConfigurationError("bucket must not be empty")
    if not isinstance(settings.part_size, int) or isinstance(settings.part_size, bool):
        raise ConfigurationError(
            f"part_size must be an integer number of bytes, got {settings.part_size!r}"
        )
    if not MIN_PART_SIZE <= settings.part_size <= MAX_PART_SIZE:
        raise ConfigurationError(
            f"part_size must be between {MIN_PART_SIZE} and {MAX_PART_SIZE} bytes, "
            f"got {settings.part_size}"
        )


def get_credentials_provider(settings: MinioSettings):
    if settings.credentials_source is CredentialsSource.STATIC:
        return StaticProvider(settings.access_key, settings.secret_key)
    return EnvMinioProvider()


class MinioFileStorage:
    """
    File storage that keeps files in a MinIO / S3 bucket.

    The client is built by :meth:`refresh_client` and can be rebuilt at any
    time (new credentials, bucket or endpoint) while other threads keep
    using the previous one. Each operation reads the current connection
    once and sticks with it.
    """

    def __init__(
        self,
        storage_name: str = DEFAULT_STORAGE_NAME,
        settings: Optional[MinioSettings] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Create a storage. No client exists until refresh_client() is called.

        Args:
            storage_name: Name put into every FileRef this storage returns
            settings: Explicit settings; if None they are read from the
                MINIOFS_* environment, and re-read on every refresh
            clock: Returns the current time for date-partitioned keys
        """
        self._storage_name = storage_name
        self.use_environment = settings is None
        self.settings = config.load_settings() if settings is None else settings
        self._clock = clock or datetime.now
        self._connection: Optional[_Connection] = None
        self._refresh_lock = threading.Lock()

    @property
    def storage_name(self) -> str:
        return self._storage_name

    @property
    def bucket(self) -> Optional[str]:
        """Bucket of the live client, None before the first refresh"""
        connection = self._connection
        return connection.bucket if connection else None

    @property
    def credentials_source(self) -> Optional[CredentialsSource]:
        connection = self._connection
        return connection.credentials_source if connection else None

    @property
    def client(self) -> Optional[Minio]:
        connection = self._connection
        return connection.client if connection else None

    def configure(self, **changes) -> None:
        """
        Change settings without touching the live client.

        Takes any of the MinioSettings fields. After this call the storage
        no longer reads the environment; apply with refresh_client().
        """
        with self._refresh_lock:
            self.settings = self.settings.merged(**changes)
            self.use_environment = False

    def refresh_client(self, **overrides) -> None:
        """
        Build a client from the current settings and make it live.

        Args:
            **overrides: MinioSettings fields applied on top of the current
                settings before validation

        Raises:
            ConfigurationError: If the endpoint or bucket is empty, the part
                size is out of range, or the endpoint cannot be parsed. The
                previous client and settings stay in place.
        """
        with self._refresh_lock:
            base = config.load_settings() if self.use_environment else self.settings
            settings = base.merged(**overrides)
            validate_settings(settings)
            host, secure = parse_endpoint(settings.endpoint_url)

            try:
                client = Minio(
                    host,
                    credentials=get_credentials_provider(settings),
                    secure=secure,
                    region=settings.region
                )
            except ValueError as e:
                raise ConfigurationError(f"Invalid MinIO client settings: {e}") from e

            self.settings = settings
            if overrides:
                self.use_environment = False
            self._connection = _Connection(
                client=client,
                bucket=settings.bucket,
                part_size=settings.part_size,
                credentials_source=settings.credentials_source
            )

        logger.info(
            f"Refreshed MinIO client for storage '{self._storage_name}': "
            f"endpoint={settings.endpoint_url}, bucket={settings.bucket}, "
            f"credentials={settings.credentials_source.value}"
        )

    def _get_connection(self, file_name: str) -> _Connection:
        connection = self._connection
        if connection is None:
            raise ClientNotInitializedError(
                f"MinIO client of storage '{self._storage_name}' is not initialized",
                file_name
            )
        return connection

    def save(self, file_name: str, data: Union[BinaryIO, bytes]) -> FileRef:
        """
        Upload a stream of unknown length under a freshly generated key.

        Args:
            file_name: Original file name (kept in the returned FileRef)
            data: Binary stream or bytes

        Returns:
            FileRef pointing at the stored object

        Raises:
            FileStorageError: If the upload fails
        """
        connection = self._get_connection(file_name)
        file_key = create_file_key(file_name, self._clock)
        if isinstance(data, (bytes, bytearray)):
            data = io.BytesIO(data)
        content_type = mimetypes.guess_type(file_name)[0] or 'application/octet-stream'

        try:
            connection.client.put_object(
                connection.bucket,
                file_key,
                data,
                -1,
                content_type=content_type,
                part_size=connection.part_size
            )
        except Exception:
            logger.error("Error saving file to MinIO storage", exc_info=True)
            raise FileStorageError(f"Could not save file {file_name}.", file_name) from None

        logger.info(f"Uploaded: {file_name} -> {file_key} to {connection.bucket}")
        return FileRef(self._storage_name, file_key, file_name)

    def open(self, ref: FileRef):
        """
        Open a stored object for reading.

        The returned response must be closed by the caller
        (``close()`` and ``release_conn()``).
        """
        connection = self._get_connection(ref.file_name)
        try:
            response = connection.client.get_object(connection.bucket, ref.path)
        except Exception:
            logger.error("Error loading file from MinIO storage", exc_info=True)
            raise FileStorageError(f"Could not load file {ref.file_name}.", ref.file_name) from None

        logger.debug(f"Opened: {ref.path} from {connection.bucket}")
        return response

    def remove(self, ref: FileRef) -> None:
        """Delete a stored object; deleting a missing key is not an error"""
        connection = self._get_connection(ref.file_name)
        try:
            connection.client.remove_object(connection.bucket, ref.path)
        except Exception:
            logger.error("Error removing file from MinIO storage", exc_info=True)
            raise FileStorageError(f"Could not delete file {ref.file_name}.", ref.file_name) from None

        logger.info(f"Deleted: {ref.path} from {connection.bucket}")

    def exists(self, ref: FileRef) -> bool:
        """
        Check whether a stored object exists.

        A missing bucket or key gives False; any other failure
        (network, permissions, bad request) raises FileStorageError.
        """
        connection = self._get_connection(ref.file_name)
        try:
            connection.client.stat_object(connection.bucket, ref.path)
            return True
        except S3Error as e:
            if e.code in NOT_FOUND_CODES:
                logger.debug(f"Not found ({e.code}): {ref.path} in {connection.bucket}")
                return False
            logger.error("Error checking file in MinIO storage", exc_info=True)
        except Exception:
            logger.error("Error checking file in MinIO storage", exc_info=True)

        raise FileStorageError(f"Could not check file {ref.file_name}", ref.file_name)
