import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from filevault.config import settings
from filevault.exceptions import NotFound, StorageError
from filevault.storage.base import BlobStore

log = logging.getLogger(__name__)

MISSING_CODES = ("404", "NoSuchKey", "NotFound")


def _is_missing(e: ClientError) -> bool:
    code = getattr(e, "response", {}).get("Error", {}).get("Code")
    return code in MISSING_CODES


class S3BlobStore(BlobStore):
    """Blobs as objects in one S3 bucket, keyed by storage name."""

    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls) -> "S3BlobStore":
        client = boto3.client(
            "s3",
            region_name = settings.S3_REGION,
            aws_access_key_id = settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key = settings.S3_SECRET_ACCESS_KEY,
            endpoint_url = settings.S3_ENDPOINT_URL,
        )
        return cls(client, settings.S3_BUCKET)

    async def _write(self, storage_name: str, content: bytes) -> None:
        try:
            await asyncio.to_thread(
                self.client.put_object, Bucket=self.bucket, Key=storage_name, Body=content,
            )
        except (ClientError, BotoCoreError) as e:
            log.exception(f"Failed to upload {storage_name} to bucket {self.bucket}")
            raise StorageError(f"Failed to store file {storage_name}") from e
        log.info(f"Stored object {storage_name} ({len(content)} bytes)")

    async def _read(self, storage_name: str) -> bytes:
        try:
            obj = await asyncio.to_thread(self.client.get_object, Bucket=self.bucket, Key=storage_name)
            return await asyncio.to_thread(obj["Body"].read)
        except ClientError as e:
            if _is_missing(e):
                raise NotFound(f"File not found or not readable: {storage_name}") from e
            log.exception(f"Failed to read {storage_name}")
            raise StorageError(f"Failed to read file {storage_name}") from e
        except BotoCoreError as e:
            log.exception(f"Failed to read {storage_name}")
            raise StorageError(f"Failed to read file {storage_name}") from e

    async def _remove(self, storage_name: str) -> None:
        # delete_object succeeds on missing keys, so look first
        try:
            await asyncio.to_thread(self.client.head_object, Bucket=self.bucket, Key=storage_name)
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=storage_name)
        except ClientError as e:
            if _is_missing(e):
                raise NotFound(f"File not found for deletion: {storage_name}") from e
            log.exception(f"Failed to delete {storage_name}")
            raise StorageError(f"Failed to delete file {storage_name}") from e
        except BotoCoreError as e:
            log.exception(f"Failed to delete {storage_name}")
            raise StorageError(f"Failed to delete file {storage_name}") from e
        log.info(f"Deleted object {storage_name}")
