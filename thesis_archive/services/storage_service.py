"""
Storage Service - keeps uploaded thesis PDFs on local disk or in S3/MinIO

Local mode writes under settings.UPLOAD_DIR and returns ``/uploads/<name>``
URLs (served by the app as static files). S3 mode uploads with boto3 and
returns the public object URL.
"""

import re
import time
import uuid
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from thesis_archive.core.config import settings
from thesis_archive.core.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    S3UploadError,
    StorageError,
)
from thesis_archive.core.logging_config import logger


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def generate_file_name(original_name: Optional[str]) -> str:
    """Unique, filesystem-safe name for an uploaded PDF"""
    stem = Path(original_name or "thesis").stem
    stem = _UNSAFE_CHARS.sub("-", stem).strip("-.")[:80] or "thesis"
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{stem}.pdf"


async def read_validated_pdf(upload: UploadFile) -> bytes:
    """
    Read an upload and enforce the PDF content type and size cap.

    Raises InvalidFileTypeError / FileTooLargeError (both 400).
    """
    allowed = settings.ALLOWED_PDF_CONTENT_TYPES
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type not in allowed:
        raise InvalidFileTypeError(content_type or "unknown", allowed)

    # Read one byte past the cap so oversized files are detected without buffering them whole
    content = await upload.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise FileTooLargeError(len(content), settings.MAX_UPLOAD_SIZE)
    return content


class LocalStorageBackend:
    def __init__(self, root: Path, url_prefix: str):
        self.root = root
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, name: str, content: bytes, content_type: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        try:
            (self.root / name).write_bytes(content)
        except OSError as e:
            raise StorageError(f"Could not store file: {e}")
        return f"{self.url_prefix}/{name}"

    def delete(self, url: str) -> bool:
        name = self.name_from_url(url)
        if not name:
            return False
        path = self.root / name
        if not path.exists():
            return False
        path.unlink()
        return True

    def name_from_url(self, url: str) -> Optional[str]:
        if not url or not url.startswith(f"{self.url_prefix}/"):
            return None
        name = url[len(self.url_prefix) + 1:]
        # Never follow a stored URL outside the upload directory
        if "/" in name or "\\" in name or name in ("", ".", ".."):
            return None
        return name


class S3StorageBackend:
    """S3 or MinIO (USE_MINIO=true) bucket holding PDFs under S3_KEY_PREFIX"""

    def __init__(self):
        self._client = None
        self._bucket_name = settings.S3_BUCKET_NAME
        self._bucket_checked = False

    def _get_client(self):
        if self._client is None:
            if settings.USE_MINIO:
                self._client = boto3.client(
                    's3',
                    endpoint_url=f"http://{settings.MINIO_ENDPOINT}",
                    aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                    config=Config(signature_version='s3v4', s3={'addressing_style': 'path'}),
                    region_name=settings.AWS_REGION
                )
            elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                self._client = boto3.client(
                    's3',
                    aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                    region_name=settings.AWS_REGION
                )
            else:
                # Instance/task role credentials
                self._client = boto3.client('s3', region_name=settings.AWS_REGION)
            self._ensure_bucket()
        return self._client

    def _ensure_bucket(self):
        if self._bucket_checked:
            return
        try:
            self._client.head_bucket(Bucket=self._bucket_name)
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', '')
            if code not in ('404', 'NoSuchBucket'):
                raise StorageError(f"Cannot access bucket '{self._bucket_name}': {code}")
            if settings.USE_MINIO or settings.AWS_REGION == 'us-east-1':
                self._client.create_bucket(Bucket=self._bucket_name)
            else:
                self._client.create_bucket(
                    Bucket=self._bucket_name,
                    CreateBucketConfiguration={'LocationConstraint': settings.AWS_REGION}
                )
            logger.info(f"Created bucket '{self._bucket_name}'")
        self._bucket_checked = True

    def _key(self, name: str) -> str:
        prefix = settings.S3_KEY_PREFIX.strip("/")
        return f"{prefix}/{name}" if prefix else name

    def _base_url(self) -> str:
        if settings.S3_PUBLIC_URL:
            return settings.S3_PUBLIC_URL.rstrip("/")
        if settings.USE_MINIO:
            return f"http://{settings.MINIO_ENDPOINT}/{self._bucket_name}"
        return f"https://{self._bucket_name}.s3.{settings.AWS_REGION}.amazonaws.com"

    def save(self, name: str, content: bytes, content_type: str) -> str:
        key = self._key(name)
        try:
            self._get_client().put_object(
                Bucket=self._bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise S3UploadError(key, str(e))
        logger.info(f"[S3-Upload] Uploaded: {key} ({len(content)} bytes)")
        return f"{self._base_url()}/{key}"

    def delete(self, url: str) -> bool:
        base = f"{self._base_url()}/"
        if not url or not url.startswith(base):
            return False
        self._get_client().delete_object(Bucket=self._bucket_name, Key=url[len(base):])
        return True


class StorageService:
    """Facade used by the thesis service; picks the backend from STORAGE_MODE"""

    def __init__(self, backend=None):
        self._backend = backend

    @property
    def backend(self):
        if self._backend is None:
            if settings.STORAGE_MODE == "s3":
                self._backend = S3StorageBackend()
            else:
                self._backend = LocalStorageBackend(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
        return self._backend

    async def save_pdf(self, upload: UploadFile) -> str:
        """Validate and store an uploaded PDF, returning its public URL"""
        content = await read_validated_pdf(upload)
        name = generate_file_name(upload.filename)
        url = self.backend.save(name, content, "application/pdf")
        logger.info(
            f"Stored PDF {name} ({len(content)} bytes)",
            extra={"event_type": "storage", "storage_mode": settings.STORAGE_MODE}
        )
        return url

    async def delete_pdf(self, url: Optional[str]) -> bool:
        """Remove a stored PDF. Failures are logged and reported as False, never raised."""
        if not url:
            return False
        try:
            removed = self.backend.delete(url)
        except Exception as e:
            logger.warning(
                f"Could not delete stored PDF {url}: {e}",
                extra={"event_type": "storage", "storage_mode": settings.STORAGE_MODE}
            )
            return False
        if not removed:
            logger.debug(f"No stored PDF found for {url}")
        return removed


# Singleton instance
storage_service = StorageService()
