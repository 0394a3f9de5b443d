import os
import time
import uuid
import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from utils.errors import StorageBackendError, StorageValidationError
from utils.image_optimization import (
    ImageFile,
    ImageOptimizationError,
    compress_image,
    get_compression_stats,
)

load_dotenv()

logger = logging.getLogger("storage")

STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "uploads")
STORAGE_NEWS_BUCKET = os.getenv("STORAGE_NEWS_BUCKET", "news_uploads")
STORAGE_ENDPOINT = os.getenv("STORAGE_ENDPOINT")
STORAGE_ACCESS_KEY = os.getenv("STORAGE_ACCESS_KEY")
STORAGE_SECRET_KEY = os.getenv("STORAGE_SECRET_KEY")
STORAGE_REGION = os.getenv("STORAGE_REGION")
STORAGE_PUBLIC_URL = os.getenv("STORAGE_PUBLIC_URL", "")

CONTENT_TYPES = ("hostels", "events", "news", "jobs")
ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "avif")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
CACHE_CONTROL = "max-age=3600"
OPTIMIZE_MAX_WIDTH = 1920
OPTIMIZE_QUALITY = 0.78


class StorageService:
    """Image uploads to an S3 compatible bucket (R2, MinIO, Supabase S3, AWS)."""

    def __init__(self, client, public_url: str, bucket: str = STORAGE_BUCKET,
                 news_bucket: str = STORAGE_NEWS_BUCKET):
        self.client = client
        self.public_url = (public_url or "").rstrip("/")
        self.bucket = bucket
        self.news_bucket = news_bucket

    def bucket_for(self, content_type: str) -> str:
        return self.news_bucket if content_type == "news" else self.bucket

    @staticmethod
    def folder_for(content_type: str) -> str:
        # news has a bucket of its own, so no type folder inside it
        return "" if content_type == "news" else content_type

    @staticmethod
    def _validate(file: ImageFile | None, content_type: str) -> str:
        if file is None or not isinstance(file, ImageFile):
            raise StorageValidationError("Invalid file provided")
        if not (file.content_type or "").startswith("image/"):
            raise StorageValidationError("File must be an image")
        if file.size > MAX_UPLOAD_BYTES:
            raise StorageValidationError("File size must be less than 5MB")
        ext = file.extension
        if ext not in ALLOWED_EXTENSIONS:
            raise StorageValidationError(
                f"Invalid file type. Supported types: {', '.join(ALLOWED_EXTENSIONS)}"
            )
        if content_type not in CONTENT_TYPES:
            raise StorageValidationError(f"Unknown content type: {content_type}")
        return ext

    @staticmethod
    def _optimize(file: ImageFile) -> ImageFile:
        try:
            optimized = compress_image(file, OPTIMIZE_MAX_WIDTH, OPTIMIZE_QUALITY)
        except ImageOptimizationError as e:
            logger.warning("Image compression failed, uploading original %s: %s", file.filename, e)
            return file
        if optimized.size < file.size:
            stats = get_compression_stats(file.size, optimized.size)
            logger.info(
                "Image optimized: %s - %s -> %s (%s%% reduction)",
                file.filename, stats["original_size"], stats["compressed_size"], stats["percent_reduction"],
            )
        return optimized

    def build_key(self, content_type: str, folder: str, ext: str) -> str:
        filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}.{ext}"
        segments = [self.folder_for(content_type), (folder or "").strip("/"), filename]
        return "/".join(s for s in segments if s)

    def public_url_for(self, bucket: str, key: str) -> str:
        if not self.public_url:
            raise StorageBackendError("Failed to get public URL for uploaded file")
        return f"{self.public_url}/{bucket}/{key}"

    async def upload_image(self, file: ImageFile, content_type: str, folder: str = "") -> str:
        try:
            ext = self._validate(file, content_type)
            to_upload = self._optimize(file)
            bucket = self.bucket_for(content_type)
            key = self.build_key(content_type, folder, ext)
            try:
                await asyncio.to_thread(
                    self.client.put_object,
                    Bucket=bucket,
                    Key=key,
                    Body=to_upload.data,
                    ContentType=to_upload.content_type,
                    CacheControl=CACHE_CONTROL,
                )
            except (ClientError, BotoCoreError) as e:
                raise StorageBackendError(f"Failed to upload image: {e}") from e
            url = self.public_url_for(bucket, key)
            logger.info("Uploaded %s to %s/%s", file.filename, bucket, key)
            return url
        except (StorageValidationError, StorageBackendError) as e:
            logger.error("Image upload error: %s", e)
            raise

    async def upload_multiple_images(self, files: list[ImageFile], content_type: str,
                                     folder: str = "") -> list[str]:
        return list(await asyncio.gather(
            *(self.upload_image(f, content_type, folder) for f in files)
        ))

    def path_from_url(self, url: str, content_type: str) -> str:
        bucket = self.bucket_for(content_type)
        parts = (url or "").split("/")
        if bucket not in parts:
            raise StorageValidationError("Invalid storage URL format")
        path = "/".join(parts[parts.index(bucket) + 1:])
        if not path:
            raise StorageValidationError("Invalid image path")
        if content_type != "news" and not path.startswith(f"{content_type}/"):
            raise StorageValidationError(f"Image path does not match content type {content_type}")
        return path

    async def delete_image(self, url: str, content_type: str) -> None:
        try:
            path = self.path_from_url(url, content_type)
            bucket = self.bucket_for(content_type)
            try:
                await asyncio.to_thread(self.client.delete_object, Bucket=bucket, Key=path)
            except (ClientError, BotoCoreError) as e:
                raise StorageBackendError(f"Failed to delete image: {e}") from e
            logger.info("Deleted %s/%s", bucket, path)
        except (StorageValidationError, StorageBackendError) as e:
            logger.error("Image deletion error: %s", e)
            raise


_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        session = boto3.session.Session()
        client = session.client(
            service_name="s3",
            aws_access_key_id=STORAGE_ACCESS_KEY,
            aws_secret_access_key=STORAGE_SECRET_KEY,
            endpoint_url=STORAGE_ENDPOINT,
            region_name=STORAGE_REGION,
        )
        _storage_service = StorageService(client, STORAGE_PUBLIC_URL)
    return _storage_service


async def image_file_from_upload(upload) -> ImageFile:
    """Read a FastAPI ``UploadFile`` into memory."""
    return ImageFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=await upload.read(),
    )
