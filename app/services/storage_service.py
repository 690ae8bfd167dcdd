"""
app/services/storage_service.py

Purpose: Picture upload relay

- Puts uploaded bytes into the image bucket under img/<name>
- Objects are public-read; callers get back the public URL
- boto3 calls run in the thread pool so the event loop never blocks
- Local directory backend for development without a bucket
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.exceptions import StorageError, ValidationError
from app.core.logging import get_logger
from utils.validation_utils import sanitize_filename

logger = get_logger(__name__)

KEY_PREFIX = "img"


@dataclass
class UploadedPicture:
    data: bytes
    filename: str
    content_type: Optional[str] = None


async def read_upload(file: Optional[UploadFile], max_bytes: int) -> Optional[UploadedPicture]:
    """
    Buffers a multipart upload in memory.

    Returns None when the request carried no file (or an empty file part).
    """
    if file is None or not file.filename:
        return None

    data = await file.read(max_bytes + 1)
    await file.close()
    if len(data) > max_bytes:
        raise ValidationError(
            "Uploaded file is too large",
            details={"field": "picture", "max_bytes": max_bytes},
        )
    if not data:
        return None
    return UploadedPicture(data=data, filename=file.filename, content_type=file.content_type)


def object_key(original_name: str) -> str:
    return f"{KEY_PREFIX}/{sanitize_filename(original_name)}"


class ObjectStore(Protocol):
    """What the handlers need from object storage."""

    async def upload(self, data: bytes, original_name: str, content_type: Optional[str]) -> str:
        ...


class S3ObjectStore:
    """S3 (or S3-compatible) backend."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        client=None,
        public_base_url: Optional[str] = None,
    ):
        self.bucket = bucket
        self.region = region
        self._client = client
        self.public_base_url = (
            public_base_url.rstrip("/") if public_base_url
            else f"https://{bucket}.s3.{region}.amazonaws.com"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        client = boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
        )
        public_base_url = settings.S3_PUBLIC_BASE_URL
        if not public_base_url and settings.S3_ENDPOINT_URL:
            public_base_url = f"{settings.S3_ENDPOINT_URL.rstrip('/')}/{settings.AWS_BUCKET_NAME}"
        return cls(
            bucket=settings.AWS_BUCKET_NAME,
            region=settings.AWS_REGION,
            client=client,
            public_base_url=public_base_url,
        )

    @property
    def client(self):
        if self._client is None:
            raise RuntimeError("S3 client not initialised")
        return self._client

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def _put(self, key: str, data: bytes, content_type: Optional[str]) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ACL="public-read",
            ContentType=content_type or "application/octet-stream",
        )

    async def upload(self, data: bytes, original_name: str, content_type: Optional[str]) -> str:
        key = object_key(original_name)
        try:
            await run_in_threadpool(self._put, key, data, content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading file to S3: {e}", extra={"key": key})
            raise StorageError() from e

        url = self.public_url(key)
        logger.info(f"Uploaded {len(data)} bytes to s3://{self.bucket}/{key}")
        return url


class LocalObjectStore:
    """
    Writes pictures below the static assets directory.
    Used when no bucket is configured outside production.
    """

    def __init__(self, root: str | Path, base_url: str = "/assets"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _write(self, key: str, data: bytes) -> None:
        path = self.root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def upload(self, data: bytes, original_name: str, content_type: Optional[str]) -> str:
        key = object_key(original_name)
        try:
            await run_in_threadpool(self._write, key, data)
        except OSError as e:
            logger.error(f"Error writing file to {self.root}: {e}", extra={"key": key})
            raise StorageError() from e
        return f"{self.base_url}/{key}"


def build_object_store(settings: Settings) -> ObjectStore:
    """
    Chooses the storage backend for the running environment.
    """
    if settings.AWS_BUCKET_NAME:
        logger.info(f"Using S3 bucket '{settings.AWS_BUCKET_NAME}' for uploads")
        return S3ObjectStore.from_settings(settings)

    if settings.is_production:
        raise ValueError("AWS_BUCKET_NAME is required in production")

    logger.warning(f"No bucket configured; storing uploads in {settings.ASSETS_DIR}")
    return LocalObjectStore(settings.ASSETS_DIR)
