"""
Storage backends for uploaded alumni photos and certificates.

Objects are stored under a UUID-based name (never the client's filename),
either in a local upload directory (development) or in an S3 bucket
(production, USE_S3=True). The returned path is what UploadedFile.file_path
records: a filesystem path for local storage, an s3:// URI for S3.
"""

import logging
import os
import uuid
from io import BytesIO
from typing import BinaryIO
import boto3
from botocore.exceptions import ClientError
from app.core.config import settings

logger = logging.getLogger(__name__)

S3_KEY_PREFIX = "uploads"


class StorageError(Exception):
    """The backend could not store or fetch an object."""


def unique_name(filename: str) -> str:
    """Stored name for an upload: a UUID plus the original (lower-cased) extension."""
    extension = os.path.splitext(filename)[1].lower()
    return f"{uuid.uuid4()}{extension}"


class StorageBackend:
    """Interface shared by the local and S3 backends"""

    def upload_file(self, file: BinaryIO, stored_name: str, content_type: str) -> str:
        """Store the stream under stored_name and return its path/URI"""
        raise NotImplementedError

    def download_file(self, file_path: str) -> BytesIO:
        raise NotImplementedError

    def delete_file(self, file_path: str) -> bool:
        """Remove an object. Returns False if there was nothing to remove."""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Upload directory on the local filesystem"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = base_dir
        os.makedirs(self.base_dir, exist_ok=True)

    def upload_file(self, file: BinaryIO, stored_name: str, content_type: str) -> str:
        file_path = os.path.join(self.base_dir, stored_name)
        with open(file_path, "wb") as target:
            target.write(file.read())
        return file_path

    def download_file(self, file_path: str) -> BytesIO:
        try:
            with open(file_path, "rb") as source:
                return BytesIO(source.read())
        except OSError as e:
            raise StorageError(f"Cannot read {file_path}: {e}") from e

    def delete_file(self, file_path: str) -> bool:
        if not os.path.exists(file_path):
            return False
        try:
            os.remove(file_path)
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False
        return True


class S3Storage(StorageBackend):
    """S3 bucket (server-side encrypted objects under the uploads/ prefix)"""

    def __init__(self):
        self.bucket_name = settings.S3_BUCKET_NAME

        # Without explicit keys boto3 falls back to the instance/task IAM role
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    def upload_file(self, file: BinaryIO, stored_name: str, content_type: str) -> str:
        key = f"{S3_KEY_PREFIX}/{stored_name}"
        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                key,
                ExtraArgs={'ContentType': content_type, 'ServerSideEncryption': 'AES256'}
            )
        except ClientError as e:
            logger.error(f"S3 upload of {key} failed: {e}")
            raise StorageError(f"Failed to upload {stored_name}") from e
        return f"s3://{self.bucket_name}/{key}"

    def download_file(self, file_path: str) -> BytesIO:
        key = self._key(file_path)
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            logger.error(f"S3 download of {key} failed: {e}")
            raise StorageError(f"Failed to download {key}") from e
        return BytesIO(response['Body'].read())

    def delete_file(self, file_path: str) -> bool:
        key = self._key(file_path)
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            logger.error(f"S3 delete of {key} failed: {e}")
            return False
        return True

    def _key(self, file_path: str) -> str:
        """Object key of an s3://bucket/key URI (bare keys pass through)."""
        if not file_path.startswith("s3://"):
            return file_path
        _, _, key = file_path[len("s3://"):].partition("/")
        if not key:
            raise StorageError(f"Invalid S3 URI: {file_path}")
        return key


def get_storage() -> StorageBackend:
    """Backend selected by USE_S3."""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.UPLOAD_DIR)
