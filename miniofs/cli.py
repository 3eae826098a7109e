# miniofs/cli.py
"""
Command line access to a MinIO file storage configured from MINIOFS_* variables.

    miniofs save ./report.pdf
    miniofs open 'minio://2024/03/07/<uuid>.pdf?name=report.pdf' -o report.pdf
    miniofs exists 'minio://...'
"""
import argparse
import logging
import os
import shutil
import sys
from pathlib import Path

from .errors import MiniofsError
from .locator import FileStorageLocator
from .management import MinioFileStorageManagement
from .models import FileRef
from .storage import MinioFileStorage

logger = logging.getLogger(__name__)

STORAGE_NAME = os.getenv('MINIOFS_STORAGE_NAME', 'minio')


def init_storage() -> FileStorageLocator:
    """Create the storage, build its client and register it"""
    storage = MinioFileStorage(STORAGE_NAME)
    logger.info(f"📦 Initializing storage '{STORAGE_NAME}'...")
    logger.info(f"   Endpoint: {storage.settings.endpoint_url}")
    logger.info(f"   Bucket: {storage.settings.bucket}")
    storage.refresh_client()

    locator = FileStorageLocator()
    locator.register(storage, default=True)
    return locator


def cmd_save(locator: FileStorageLocator, args) -> int:
    path = Path(args.path)
    with path.open('rb') as f:
        ref = locator.get_default().save(args.name or path.name, f)
    print(ref.to_uri())
    return 0


def cmd_open(locator: FileStorageLocator, args) -> int:
    ref = FileRef.from_uri(args.ref)
    response = locator.get_by_name(ref.storage_name).open(ref)
    try:
        if args.output:
            with open(args.output, 'wb') as out:
                shutil.copyfileobj(response, out)
        else:
            shutil.copyfileobj(response, sys.stdout.buffer)
    finally:
        response.close()
        release_conn = getattr(response, 'release_conn', None)
        if release_conn is not None:
            release_conn()
    return 0


def cmd_remove(locator: FileStorageLocator, args) -> int:
    ref = FileRef.from_uri(args.ref)
    locator.get_by_name(ref.storage_name).remove(ref)
    return 0


def cmd_exists(locator: FileStorageLocator, args) -> int:
    ref = FileRef.from_uri(args.ref)
    found = locator.get_by_name(ref.storage_name).exists(ref)
    print('yes' if found else 'no')
    return 0 if found else 1


def cmd_refresh(locator: FileStorageLocator, args) -> int:
    print(MinioFileStorageManagement(locator).refresh_minio_client(args.storage))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='miniofs', description='MinIO file storage')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('save', help='upload a local file and print its reference')
    p.add_argument('path')
    p.add_argument('--name', help='file name to record (defaults to the local name)')
    p.set_defaults(func=cmd_save)

    p = sub.add_parser('open', help='download a file by reference')
    p.add_argument('ref')
    p.add_argument('-o', '--output', help='write to this path instead of stdout')
    p.set_defaults(func=cmd_open)

    p = sub.add_parser('remove', help='delete a file by reference')
    p.add_argument('ref')
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser('exists', help='exit 0 if the file exists, 1 if not')
    p.add_argument('ref')
    p.set_defaults(func=cmd_exists)

    p = sub.add_parser('refresh', help='rebuild the client from the environment')
    p.add_argument('storage', nargs='?', help='storage name (default storage if omitted)')
    p.set_defaults(func=cmd_refresh)
    return parser


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    try:
        locator = init_storage()
        return args.func(locator, args)
    except (MiniofsError, ValueError, OSError) as e:
        logger.error(f"❌ {args.command} failed: {e}")
        return 2


if __name__ == '__main__':
    sys.exit(main())
