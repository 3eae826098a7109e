# miniofs/keys.py
"""Object key generation: ``YYYY/MM/DD/<uuid>[.<extension>]``"""
import uuid
from datetime import datetime
from typing import Callable, Optional


def get_extension(file_name: str) -> str:
    """
    Extension of a file name, without the dot.

    Only the last path segment is looked at, so dots in directory
    names are ignored. Returns an empty string when there is none.
    """
    base = file_name.replace('\\', '/').rsplit('/', 1)[-1]
    if '.' not in base:
        return ''
    return base.rsplit('.', 1)[1]


def create_date_dir(now: datetime) -> str:
    return f"{now.year}/{now.month:02d}/{now.day:02d}"


def create_uuid_filename(file_name: str) -> str:
    extension = get_extension(file_name)
    if extension:
        return f"{uuid.uuid4()}.{extension}"
    return str(uuid.uuid4())


def create_file_key(file_name: str, clock: Optional[Callable[[], datetime]] = None) -> str:
    """
    Generate a unique object key for a file being saved.

    Args:
        file_name: Original file name, used only for its extension
        clock: Returns the current time (defaults to datetime.now)

    Returns:
        Key such as ``2024/03/07/1b4e28ba-2fa1-11d2-883f-0016d3cca427.pdf``
    """
    now = (clock or datetime.now)()
    return f"{create_date_dir(now)}/{create_uuid_filename(file_name)}"
