import logging
import os
from pathlib import Path

import aiofiles
import aiofiles.os

from filevault.exceptions import NotFound, StorageError
from filevault.storage.base import BlobStore

log = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Blobs as flat files under a single root directory."""

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)

    def _resolve(self, storage_name: str) -> Path:
        root = self.root.resolve()
        path = (root / storage_name).resolve()
        if path.parent != root:
            raise NotFound(f"File not found: {storage_name}")
        return path

    async def _write(self, storage_name: str, content: bytes) -> None:
        try:
            await aiofiles.os.makedirs(self.root, exist_ok=True)
        except OSError as e:
            log.exception("Could not create upload directory")
            raise StorageError("Could not create upload directory") from e

        path = self._resolve(storage_name)
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            log.exception(f"Failed to write blob {storage_name}")
            raise StorageError(f"Failed to store file {storage_name}") from e
        log.info(f"Stored blob {storage_name} ({len(content)} bytes)")

    async def _read(self, storage_name: str) -> bytes:
        path = self._resolve(storage_name)
        if not await aiofiles.os.path.isfile(path) or not await aiofiles.os.access(path, os.R_OK):
            raise NotFound(f"File not found or not readable: {storage_name}")
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise NotFound(f"File not found or not readable: {storage_name}") from e
        except OSError as e:
            log.exception(f"Failed to read blob {storage_name}")
            raise StorageError(f"Failed to read file {storage_name}") from e

    async def _remove(self, storage_name: str) -> None:
        path = self._resolve(storage_name)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise NotFound(f"File not found for deletion: {storage_name}") from e
        except OSError as e:
            log.exception(f"Failed to delete blob {storage_name}")
            raise StorageError(f"Failed to delete file {storage_name}") from e
        log.info(f"Deleted blob {storage_name}")
