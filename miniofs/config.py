# miniofs/config.py
"""
Environment-bound storage settings.

    MINIOFS_ENDPOINT_URL   e.g. 'http://minio:9000' or 'https://s3.amazonaws.com'
    MINIOFS_BUCKET         bucket name
    MINIOFS_ACCESS_KEY     optional, falls back to MINIO_ACCESS_KEY at request time
    MINIOFS_SECRET_KEY     optional, falls back to MINIO_SECRET_KEY at request time
    MINIOFS_REGION         optional, e.g. 'us-east-1'
    MINIOFS_PART_SIZE      upload part size in bytes (default 5242880)
"""
import os
import logging
from typing import Optional

from .errors import ConfigurationError
from .models import DEFAULT_PART_SIZE, MinioSettings

logger = logging.getLogger(__name__)

ENV_PREFIX = 'MINIOFS_'


def _getenv(name: str, prefix: str) -> Optional[str]:
    value = os.getenv(prefix + name)
    return value if value else None


def load_settings(prefix: str = ENV_PREFIX) -> MinioSettings:
    """
    Read storage settings from environment variables.

    Missing or empty variables leave the field unset. Required fields are
    checked later, when the client is refreshed.

    Raises:
        ConfigurationError: If the part size is not an integer
    """
    raw_part_size = _getenv('PART_SIZE', prefix)
    if raw_part_size is None:
        part_size = DEFAULT_PART_SIZE
    else:
        try:
            part_size = int(raw_part_size)
        except ValueError:
            raise ConfigurationError(
                f"{prefix}PART_SIZE must be an integer number of bytes, got '{raw_part_size}'"
            ) from None

    settings = MinioSettings(
        endpoint_url=_getenv('ENDPOINT_URL', prefix),
        bucket=_getenv('BUCKET', prefix),
        access_key=_getenv('ACCESS_KEY', prefix),
        secret_key=_getenv('SECRET_KEY', prefix),
        region=_getenv('REGION', prefix),
        part_size=part_size,
    )
    logger.debug(f"Loaded settings from {prefix}* environment: "
                 f"endpoint={settings.endpoint_url}, bucket={settings.bucket}")
    return settings
