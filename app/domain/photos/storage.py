"""Object storage for photo binaries (Cloudflare R2 through the S3 API)"""

import logging

import boto3
from botocore.config import Config

from ...config import (
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_NAME,
    R2_PUBLIC_BASE_URL,
    R2_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)


class PhotoStorage:
    """What the photo service needs from a bucket."""

    def put(self, key: str, data: bytes, content_type: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def public_url(self, key: str) -> str:
        raise NotImplementedError


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


class R2PhotoStorage(PhotoStorage):
    def __init__(self, client=None, bucket: str = R2_BUCKET_NAME, public_base_url: str = R2_PUBLIC_BASE_URL):
        self._client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def client(self):
        # Built lazily so the API can start without R2 credentials
        if self._client is None:
            self._client = get_r2_client()
        return self._client

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        logger.info(f"📤 Stored {key} ({len(data)} bytes)")

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)
        logger.info(f"🗑️ Removed {key} from storage")

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com/{self.bucket}/{key}"
