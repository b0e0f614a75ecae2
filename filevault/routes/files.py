from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile

from filevault.core.deps import get_current_user, get_file_service
from filevault.models.user import User
from filevault.schemas.file import FilePage, FileResponse, FileStats, MessageResponse, ShareLink
from filevault.services.files import Download, FileService
from filevault.storage.base import check_size


router = APIRouter(
    prefix="/files",
    tags=["Files"]
)


def content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def attachment(download: Download) -> Response:
    record = download.record
    return Response(
        content=download.content,
        media_type=record.content_type,
        headers={"Content-Disposition": content_disposition(record.original_filename)},
    )

# -------------Upload -----------------

@router.post("/upload", response_model=FileResponse)
async def upload_file(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    # refuse oversized parts before pulling them into memory
    if file.size is not None:
        check_size(file.size)
    contents = await file.read()
    declared_size = file.size if file.size is not None else len(contents)
    return await files.upload(contents, file.filename, declared_size, file.content_type, user.id)

#-----------List my files-----------------

@router.get("", response_model=FilePage)
async def list_files(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    search: str | None = Query(None),
    user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return await files.list_files(user.id, search, page, size)

#-----------Stats------------------

@router.get("/stats", response_model=FileStats)
async def file_stats(
    user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return await files.stats(user.id)

#-----------Download------------------

@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return attachment(await files.download(file_id, user.id))

#-----------Share links------------------

@router.post("/{file_id}/share", response_model=ShareLink)
async def create_share_link(
    file_id: str,
    expiration_hours: int | None = Query(None, alias="expirationHours"),
    user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    return await files.create_share_link(file_id, user.id, expiration_hours)


@router.get("/share/{public_link_id}")
async def download_shared_file(
    public_link_id: str,
    files: FileService = Depends(get_file_service),
):
    return attachment(await files.download_shared(public_link_id))

#-----------Delete-------------

@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: str,
    user: User = Depends(get_current_user),
    files: FileService = Depends(get_file_service),
):
    await files.delete(file_id, user.id)
    return MessageResponse(message="File deleted successfully")
