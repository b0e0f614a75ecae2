"""Blob store contract and the upload validation shared by every backend."""
import uuid
from abc import ABC, abstractmethod
from pathlib import PurePosixPath

from filevault.exceptions import InvalidInput, QuotaExceeded

MAX_FILE_SIZE = 100 * 1024 * 1024
MAX_FILENAME_LENGTH = 255

ALLOWED_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".gif", ".pdf", ".doc", ".docx",
    ".xls", ".xlsx", ".ppt", ".pptx", ".txt", ".zip", ".rar",
})


def clean_filename(name: str) -> str:
    """Strip directory components from a client supplied filename."""
    return PurePosixPath(name.replace("\\", "/")).name


def file_extension(name: str) -> str:
    """Lower-cased extension including the dot, or "" when there is none."""
    cleaned = clean_filename(name)
    if "." not in cleaned:
        return ""
    return cleaned[cleaned.rindex("."):].lower()


def check_filename(name: str | None) -> str:
    """Reject blank, traversal, over-long and disallowed-extension names.

    Returns the extension to use for the storage name.
    """
    if name is None or not name.strip():
        raise InvalidInput("File must have a valid name")
    if ".." in name:
        raise InvalidInput(f"Filename contains invalid path sequence: {name}")
    if len(clean_filename(name)) > MAX_FILENAME_LENGTH:
        raise InvalidInput(f"Filename exceeds {MAX_FILENAME_LENGTH} characters")

    extension = file_extension(name)
    if extension not in ALLOWED_EXTENSIONS:
        raise InvalidInput(f"File type not allowed: {extension or name}")
    return extension


def check_size(size: int) -> None:
    if size > MAX_FILE_SIZE:
        raise QuotaExceeded(size, MAX_FILE_SIZE)


def check_storage_name(storage_name: str | None) -> None:
    if storage_name is None or not storage_name.strip():
        raise InvalidInput("Filename cannot be null or empty")
    if ".." in storage_name:
        raise InvalidInput(f"Filename contains invalid path sequence: {storage_name}")


class BlobStore(ABC):
    """Bytes keyed by an opaque storage name.

    Subclasses only move bytes; naming and validation live here so every
    backend rejects the same input.
    """

    async def store(self, content: bytes, original_name: str, declared_size: int) -> str:
        if not content:
            raise InvalidInput("Cannot store empty file")
        extension = check_filename(original_name)
        check_size(declared_size)

        storage_name = f"{uuid.uuid4()}{extension}"
        await self._write(storage_name, content)
        return storage_name

    async def load(self, storage_name: str) -> bytes:
        check_storage_name(storage_name)
        return await self._read(storage_name)

    async def delete(self, storage_name: str) -> None:
        check_storage_name(storage_name)
        await self._remove(storage_name)

    @abstractmethod
    async def _write(self, storage_name: str, content: bytes) -> None:
        ...

    @abstractmethod
    async def _read(self, storage_name: str) -> bytes:
        """Raise NotFound when the blob is absent."""

    @abstractmethod
    async def _remove(self, storage_name: str) -> None:
        """Raise NotFound when the blob is absent."""
