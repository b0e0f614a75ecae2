"""Query and persistence access over FileRecord metadata."""
import logging
import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from filevault.exceptions import NotFound, StorageError
from filevault.models.file import FileRecord

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total / self.size)


class FileRecordStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: FileRecord) -> FileRecord:
        self.session.add(record)
        await self._commit(f"create record for {record.filename}")
        await self.session.refresh(record)
        return record

    async def save(self, record: FileRecord) -> FileRecord:
        self.session.add(record)
        await self._commit(f"update record {record.id}")
        await self.session.refresh(record)
        return record

    async def delete(self, record: FileRecord) -> None:
        await self.session.delete(record)
        await self._commit(f"delete record {record.id}")

    async def find_by_owner_ordered(self, owner_id: str, page: int, size: int) -> Page[FileRecord]:
        return await self._page(FileRecord.owner_id == owner_id, page=page, size=size)

    async def find_by_owner_and_name_contains(
            self, owner_id: str, search: str | None, page: int, size: int,
    ) -> Page[FileRecord]:
        """Case-insensitive substring match on storage or original name."""
        if search is None or not search.strip():
            return await self.find_by_owner_ordered(owner_id, page, size)

        term = search.strip()
        return await self._page(
            FileRecord.owner_id == owner_id,
            or_(
                FileRecord.filename.icontains(term, autoescape=True),
                FileRecord.original_filename.icontains(term, autoescape=True),
            ),
            page=page,
            size=size,
        )

    async def find_by_id_and_owner(self, file_id: str, owner_id: str) -> FileRecord:
        result = await self.session.execute(
            select(FileRecord).where(FileRecord.id == file_id, FileRecord.owner_id == owner_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFound(f"File not found with ID: {file_id}")
        return record

    async def find_by_public_link_id(self, link_id: str) -> FileRecord:
        result = await self.session.execute(
            select(FileRecord).where(FileRecord.public_link_id == link_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFound(f"Shared file not found with link ID: {link_id}")
        return record

    async def total_size_for_owner(self, owner_id: str) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(FileRecord.file_size), 0)).where(FileRecord.owner_id == owner_id)
        )
        return int(result.scalar_one())

    async def count_for_owner(self, owner_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(FileRecord).where(FileRecord.owner_id == owner_id)
        )
        return int(result.scalar_one())

    async def _page(self, *criteria, page: int, size: int) -> Page[FileRecord]:
        total = await self.session.execute(
            select(func.count()).select_from(FileRecord).where(*criteria)
        )
        rows = await self.session.execute(
            select(FileRecord)
            .where(*criteria)
            .order_by(FileRecord.created_at.desc(), FileRecord.id)
            .limit(size)
            .offset(page * size)
        )
        return Page(items=list(rows.scalars().all()), total=int(total.scalar_one()), page=page, size=size)

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.exception(f"Database failure: {action}")
            raise StorageError(f"Failed to {action}") from e
