"""File lifecycle: upload, listing, download, share links, deletion, stats.

Blob and record live in two independent systems and nothing spans them
with a transaction. Upload writes the blob then the record; delete
removes the blob then the record. A failure between the two steps
leaves an orphaned blob (upload) or a record pointing at nothing
(delete). These windows are not repaired here.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from filevault.exceptions import InvalidInput, NotFound, StorageError
from filevault.models.file import FileRecord
from filevault.repositories.files import FileRecordStore
from filevault.schemas.file import FilePage, FileResponse, FileStats, ShareLink
from filevault.storage.base import BlobStore, check_filename, check_size, clean_filename

log = logging.getLogger(__name__)

MAX_SHARE_EXPIRATION_HOURS = 24 * 365
SHARE_URL_PREFIX = "/files/share/"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_CONTENT_TYPE_LENGTH = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Download:
    content: bytes
    record: FileRecord


class FileService:
    def __init__(
            self,
            records: FileRecordStore,
            blobs: BlobStore,
            clock: Callable[[], datetime] = utcnow,
    ):
        self.records = records
        self.blobs = blobs
        self.clock = clock

    async def upload(
            self,
            content: bytes,
            original_name: str | None,
            declared_size: int,
            content_type: str | None,
            owner_id: str,
    ) -> FileResponse:
        """Store the bytes, then persist metadata.

        The declared size is recorded as-is, it is not measured against
        the bytes actually written.
        """
        if not content:
            raise InvalidInput("Cannot upload empty file")
        check_size(declared_size)
        check_filename(original_name)
        if content_type and len(content_type) > MAX_CONTENT_TYPE_LENGTH:
            raise InvalidInput(f"Content type exceeds {MAX_CONTENT_TYPE_LENGTH} characters")

        storage_name = await self.blobs.store(content, original_name, declared_size)

        record = FileRecord(
            owner_id=owner_id,
            filename=storage_name,
            original_filename=clean_filename(original_name),
            file_size=declared_size,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            is_public=False,
        )
        try:
            record = await self.records.create(record)
        except StorageError:
            log.error(f"Record creation failed, blob {storage_name} left without metadata")
            raise

        log.info(f"User {owner_id} uploaded {record.original_filename} as {record.id}")
        return FileResponse.model_validate(record)

    async def list_files(self, owner_id: str, search: str | None, page: int, size: int) -> FilePage:
        if page < 0:
            raise InvalidInput("Page index must not be negative")
        if size < 1:
            raise InvalidInput("Page size must be at least 1")

        result = await self.records.find_by_owner_and_name_contains(owner_id, search, page, size)
        return FilePage(
            files=[FileResponse.model_validate(r) for r in result.items],
            current_page=result.page,
            total_items=result.total,
            total_pages=result.total_pages,
        )

    async def download(self, file_id: str, owner_id: str) -> Download:
        record = await self.records.find_by_id_and_owner(file_id, owner_id)
        content = await self._load(record, "File not found on storage")
        return Download(content=content, record=record)

    async def create_share_link(
            self, file_id: str, owner_id: str, expiration_hours: int | None = None,
    ) -> ShareLink:
        """Issue a fresh public link, replacing any previous one."""
        record = await self.records.find_by_id_and_owner(file_id, owner_id)

        expires_at = None
        if expiration_hours is not None and expiration_hours > 0:
            if expiration_hours > MAX_SHARE_EXPIRATION_HOURS:
                raise InvalidInput(
                    f"Expiration cannot exceed 1 year ({MAX_SHARE_EXPIRATION_HOURS} hours)",
                )
            expires_at = self.clock() + timedelta(hours=expiration_hours)

        link_id = str(uuid.uuid4())
        record.public_link_id = link_id
        record.is_public = True
        record.public_link_expires_at = expires_at
        await self.records.save(record)

        log.info(f"Share link created for {record.id} (expires {expires_at or 'never'})")
        return ShareLink(
            public_link_id=link_id,
            share_url=f"{SHARE_URL_PREFIX}{link_id}",
            expires_at=expires_at,
        )

    async def get_shared(self, link_id: str) -> FileRecord:
        """Resolve a public link, checking expiry at access time."""
        record = await self.records.find_by_public_link_id(link_id)

        if record.link_expired(self.clock()):
            log.warning(f"Expired share link {link_id} requested")
            raise NotFound("Shared link has expired")
        if record.is_public is not True:
            log.warning(f"Share link {link_id} points at a private file")
            raise NotFound("File is not publicly accessible")
        return record

    async def download_shared(self, link_id: str) -> Download:
        record = await self.get_shared(link_id)
        content = await self._load(record, "Shared file not found on storage")
        return Download(content=content, record=record)

    async def delete(self, file_id: str, owner_id: str) -> None:
        record = await self.records.find_by_id_and_owner(file_id, owner_id)

        try:
            await self.blobs.delete(record.filename)
        except NotFound:
            # another delete of the same file got here first
            log.warning(f"Blob {record.filename} already gone, record {record.id} kept")
            raise
        except StorageError:
            log.error(f"Blob {record.filename} could not be deleted, record {record.id} kept")
            raise

        await self.records.delete(record)
        log.info(f"User {owner_id} deleted {file_id}")

    async def stats(self, owner_id: str) -> FileStats:
        return FileStats(
            total_files=await self.records.count_for_owner(owner_id),
            total_size=await self.records.total_size_for_owner(owner_id),
        )

    async def _load(self, record: FileRecord, message: str) -> bytes:
        try:
            return await self.blobs.load(record.filename)
        except NotFound as e:
            log.warning(f"Blob {record.filename} missing for record {record.id}")
            raise NotFound(f"{message}: {record.original_filename}") from e
