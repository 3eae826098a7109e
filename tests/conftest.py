"""Shared fixtures: an in-memory stand-in for minio.Minio."""
import io
import threading
from datetime import datetime

import pytest
from minio.error import S3Error

from miniofs import MinioFileStorage, MinioSettings


class FakeS3Error(S3Error):
    """S3Error carrying only an error code"""

    def __init__(self, code):
        Exception.__init__(self, code)
        self._fake_code = code

    @property
    def code(self):
        return self._fake_code

    def __str__(self):
        return f"S3 operation failed; code: {self._fake_code}"


class FakeResponse(io.BytesIO):
    """Mimics the urllib3 response returned by get_object"""

    def __init__(self, data):
        super().__init__(data)
        self.released = False

    def release_conn(self):
        self.released = True


class FakeMinio:
    """
    In-memory MinIO client.

    Objects live in a store shared by every client instance so that data
    survives client refreshes, like a real server would.
    """

    def __init__(self, endpoint, credentials=None, secure=True, region=None, **kwargs):
        self.endpoint = endpoint
        self.credentials = credentials
        self.secure = secure
        self.region = region
        self.store = FakeMinio.store
        self.puts = []
        self.fail_with = None

    store = {}
    buckets = set()
    lock = threading.Lock()

    def _check(self, bucket_name):
        if self.fail_with is not None:
            raise self.fail_with
        if bucket_name not in self.buckets:
            raise FakeS3Error('NoSuchBucket')

    def put_object(self, bucket_name, object_name, data, length, content_type=None, part_size=0, **kwargs):
        self._check(bucket_name)
        payload = data.read()
        with self.lock:
            self.store[(bucket_name, object_name)] = payload
            self.puts.append({
                'bucket': bucket_name,
                'key': object_name,
                'length': length,
                'part_size': part_size,
                'content_type': content_type,
            })

    def get_object(self, bucket_name, object_name):
        self._check(bucket_name)
        try:
            return FakeResponse(self.store[(bucket_name, object_name)])
        except KeyError:
            raise FakeS3Error('NoSuchKey') from None

    def remove_object(self, bucket_name, object_name):
        self._check(bucket_name)
        with self.lock:
            self.store.pop((bucket_name, object_name), None)

    def stat_object(self, bucket_name, object_name):
        self._check(bucket_name)
        if (bucket_name, object_name) not in self.store:
            raise FakeS3Error('NoSuchKey')
        return object()


@pytest.fixture
def fake_minio(monkeypatch):
    FakeMinio.store = {}
    FakeMinio.buckets = {'files', 'archive'}
    monkeypatch.setattr('miniofs.storage.Minio', FakeMinio)
    return FakeMinio


@pytest.fixture
def settings():
    return MinioSettings(
        endpoint_url='http://localhost:9000',
        bucket='files',
        access_key='minioadmin',
        secret_key='minioadmin',
    )


@pytest.fixture
def storage(fake_minio, settings):
    storage = MinioFileStorage(
        'minio',
        settings=settings,
        clock=lambda: datetime(2024, 3, 7, 12, 30)
    )
    storage.refresh_client()
    return storage
