from datetime import datetime

from filevault.schemas.base import CamelORMModel


class FileResponse(CamelORMModel):
    id: str
    filename: str
    original_filename: str
    file_size: int
    content_type: str
    public_link_id: str | None = None
    public_link_expires_at: datetime | None = None
    is_public: bool = False
    created_at: datetime
    updated_at: datetime


class FilePage(CamelORMModel):
    files: list[FileResponse]
    current_page: int
    total_items: int
    total_pages: int


class ShareLink(CamelORMModel):
    public_link_id: str
    share_url: str
    expires_at: datetime | None = None


class FileStats(CamelORMModel):
    total_files: int
    total_size: int


class MessageResponse(CamelORMModel):
    message: str
