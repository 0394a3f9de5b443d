import io
import os
import sys

import pytest
from botocore.exceptions import ClientError
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db import LocalDatabase
from utils.image_optimization import ImageFile
from utils.local_storage import MemoryKeyValueStore
from utils.mock_db import MockDatabase
from utils.repositories import build_repositories
from utils.storage_service import StorageService

PUBLIC_URL = "https://cdn.example.test/storage/v1/object/public"


class FakeS3Client:
    """Records put/delete calls the way boto3's S3 client receives them."""

    def __init__(self, fail_put: bool = False, fail_delete: bool = False):
        self.fail_put = fail_put
        self.fail_delete = fail_delete
        self.objects: dict[tuple[str, str], dict] = {}
        self.calls: list[tuple[str, dict]] = []

    def put_object(self, **kwargs):
        self.calls.append(("put_object", kwargs))
        if self.fail_put:
            raise ClientError({"Error": {"Code": "500", "Message": "bucket unavailable"}}, "PutObject")
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = kwargs
        return {"ETag": '"etag"'}

    def delete_object(self, **kwargs):
        self.calls.append(("delete_object", kwargs))
        if self.fail_delete:
            raise ClientError({"Error": {"Code": "403", "Message": "denied"}}, "DeleteObject")
        self.objects.pop((kwargs["Bucket"], kwargs["Key"]), None)
        return {}


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def storage(s3_client):
    return StorageService(s3_client, PUBLIC_URL, bucket="uploads", news_bucket="news_uploads")


@pytest.fixture
def make_image():
    """Build an ImageFile of random noise so that sizes are realistic."""
    def _make(width=800, height=600, fmt="JPEG", filename="photo.jpg", quality=100):
        img = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
        buffer = io.BytesIO()
        kwargs = {"quality": quality} if fmt in ("JPEG", "WEBP") else {}
        img.save(buffer, format=fmt, **kwargs)
        mime = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp", "GIF": "image/gif"}[fmt]
        return ImageFile(filename=filename, content_type=mime, data=buffer.getvalue())
    return _make


@pytest.fixture
def mock_database():
    return MockDatabase(latency_scale=0)


@pytest.fixture
def mock_repos(mock_database):
    return build_repositories("mock", mock_database=mock_database)


@pytest.fixture
def kv_store():
    return MemoryKeyValueStore()


@pytest.fixture
def local_database(kv_store):
    database = LocalDatabase(kv_store)
    yield database
    database.reset()


@pytest.fixture
def local_repos(local_database):
    return build_repositories("local", local_database=local_database)
