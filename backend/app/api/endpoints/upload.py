from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from typing import Optional
import logging

from app.core.auth import get_current_user
from app.core.exceptions import ContentValidationError
from app.models.user import User
from app.schemas.auth import UploadResponse
from app.services.storage import LocalImageStorage

logger = logging.getLogger(__name__)
router = APIRouter()

CHUNK_SIZE = 64 * 1024


def get_image_storage() -> LocalImageStorage:
    return LocalImageStorage()


async def _read_capped(file: UploadFile, limit: int) -> bytes:
    """Read at most ``limit + 1`` bytes so an oversize body is never buffered whole."""
    content = b""
    while len(content) <= limit:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        content += chunk
    return content[: limit + 1]


async def _store_upload(
    request: Request,
    file: Optional[UploadFile],
    subdirectory: str,
    field_name: str,
    storage: LocalImageStorage,
) -> UploadResponse:
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    content = await _read_capped(file, storage.max_size)
    try:
        stored = storage.save(
            content,
            subdirectory=subdirectory,
            field_name=field_name,
            original_name=file.filename,
            content_type=file.content_type,
        )
    except ContentValidationError as e:
        logger.warning(f"Rejected upload '{file.filename}': {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        f"Stored upload {stored.path} ({stored.size} bytes, {stored.content_type})"
    )

    file_url = str(request.base_url).rstrip("/") + stored.url_path
    return UploadResponse(success=True, file_url=file_url, file_name=stored.file_name)


@router.post("/event-image", response_model=UploadResponse)
async def upload_event_image(
    request: Request,
    file: Optional[UploadFile] = File(None, alias="eventImage"),
    storage: LocalImageStorage = Depends(get_image_storage),
    current_user: User = Depends(get_current_user),
):
    """Upload an event cover image (form field ``eventImage``)."""
    return await _store_upload(request, file, "events", "eventImage", storage)


@router.post("/icon-image", response_model=UploadResponse)
async def upload_icon_image(
    request: Request,
    file: Optional[UploadFile] = File(None, alias="iconImage"),
    storage: LocalImageStorage = Depends(get_image_storage),
    current_user: User = Depends(get_current_user),
):
    """Upload an event item icon (form field ``iconImage``)."""
    return await _store_upload(request, file, "icons", "iconImage", storage)


@router.post("/blog-image", response_model=UploadResponse)
async def upload_blog_image(
    request: Request,
    file: Optional[UploadFile] = File(None, alias="blogImage"),
    storage: LocalImageStorage = Depends(get_image_storage),
    current_user: User = Depends(get_current_user),
):
    """Upload a blog image (form field ``blogImage``)."""
    return await _store_upload(request, file, "blogs", "blogImage", storage)


@router.post("/highlight-image", response_model=UploadResponse)
async def upload_highlight_image(
    request: Request,
    file: Optional[UploadFile] = File(None, alias="highlightImage"),
    storage: LocalImageStorage = Depends(get_image_storage),
    current_user: User = Depends(get_current_user),
):
    """Upload a highlight image (form field ``highlightImage``)."""
    return await _store_upload(request, file, "highlights", "highlightImage", storage)
