"""Where uploaded photos go: S3 when a bucket is configured, otherwise inline.

Both stores take the raw bytes and return a reference the analyze endpoint
can resolve later.
"""
import base64
import logging
import mimetypes
import os
import uuid

from fastapi.concurrency import run_in_threadpool

from floodscout.config import Settings

logger = logging.getLogger(__name__)


class InlineImageStore:
    """Nothing is written server-side; the caller gets a base64 data URL back."""

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        encoded = base64.b64encode(data).decode("utf-8")
        return f"data:{content_type};base64,{encoded}"


class S3ImageStore:
    def __init__(self, bucket: str, client, region: str = "us-east-1", public_base_url: str = ""):
        self.bucket = bucket
        self.client = client
        self.region = region
        self.public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ImageStore":
        import boto3

        client = boto3.client("s3", region_name=settings.s3_region)
        return cls(
            bucket=settings.s3_bucket,
            client=client,
            region=settings.s3_region,
            public_base_url=settings.s3_public_base_url,
        )

    def _object_key(self, filename: str, content_type: str) -> str:
        ext = os.path.splitext(filename)[1].lower()
        if not ext:
            ext = mimetypes.guess_extension(content_type) or ""
        return f"uploads/{uuid.uuid4()}{ext}"

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        key = self._object_key(filename, content_type)
        # boto3 is blocking
        await run_in_threadpool(
            self.client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return self.public_url(key)


ImageStore = InlineImageStore | S3ImageStore


def build_image_store(settings: Settings) -> ImageStore:
    if settings.s3_bucket:
        logger.info("Uploads go to S3 bucket %s", settings.s3_bucket)
        return S3ImageStore.from_settings(settings)
    logger.info("No S3 bucket configured, uploads are returned as data URLs")
    return InlineImageStore()
