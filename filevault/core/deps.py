from functools import lru_cache

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from filevault.config import settings
from filevault.database import get_async_session
from filevault.exceptions import NotFound, Unauthorized
from filevault.models.user import User
from filevault.core.security import decode_access_token
from filevault.repositories.files import FileRecordStore
from filevault.repositories.users import UserStore
from filevault.services.files import FileService
from filevault.services.users import UserService
from filevault.storage.base import BlobStore
from filevault.storage.local import LocalBlobStore
from filevault.storage.s3 import S3BlobStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/signin", auto_error=False)


@lru_cache
def get_blob_store() -> BlobStore:
    if settings.FILE_STORAGE_TYPE == "s3":
        return S3BlobStore.from_settings()
    if settings.FILE_STORAGE_TYPE == "local":
        return LocalBlobStore(settings.FILE_STORAGE_PATH)
    raise ValueError(f"Unknown storage type: {settings.FILE_STORAGE_TYPE}")


def get_user_service(session: AsyncSession = Depends(get_async_session)) -> UserService:
    return UserService(UserStore(session))


def get_file_service(
        session: AsyncSession = Depends(get_async_session),
        blobs: BlobStore = Depends(get_blob_store),
) -> FileService:
    return FileService(FileRecordStore(session), blobs)


async def get_current_user(
        token: str | None = Depends(oauth2_scheme),
        users: UserService = Depends(get_user_service),
) -> User:
    if not token:
        raise Unauthorized("Full authentication is required to access this resource")

    user_id = decode_access_token(token)
    if not user_id:
        raise Unauthorized("Invalid token")
    
    try:
        return await users.get(user_id)
    except NotFound:
        raise Unauthorized("User not found")
