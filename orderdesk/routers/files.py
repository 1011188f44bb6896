# orderdesk/routers/files.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from orderdesk.core.auth import require_auth
from orderdesk.core.config import get_settings
from orderdesk.core.storage_utils import BlobStorage, get_storage
from orderdesk.database import get_session
from orderdesk.models.user import User
from orderdesk.schemas.file import (
    FileDownloadRequest,
    FileUploadRequest,
    FileUploadResult,
    SignedUrlRead,
)
from orderdesk.repositories.file_repo import FileRepository
from orderdesk.repositories.message_repo import MessageRepository
from orderdesk.repositories.order_repo import OrderRepository
from orderdesk.repositories.quote_repo import QuoteRepository
from orderdesk.services.access_service import AccessService
from orderdesk.services.file_service import FileService, parse_order_id

settings = get_settings()

router = APIRouter(prefix="/files", tags=["Files"])

order_repo = OrderRepository()
file_repo = FileRepository()
access_service = AccessService(
    order_repo, file_repo, QuoteRepository(), MessageRepository()
)


def get_file_service(storage: BlobStorage = Depends(get_storage)) -> FileService:
    return FileService(order_repo, file_repo, storage)


@router.post("/upload", response_model=FileUploadResult)
def upload_order_file(
    payload: FileUploadRequest,
    session: Session = Depends(get_session),
    service: FileService = Depends(get_file_service),
):
    """
    Attach one file to an order right after submission.

    Body: {"orderId", "filename", "fileData" (base64 / data URL), "contentType"}

    Responses:
      - 200 {"success": true, "storagePath"}
      - 400 invalid input / filename / too many / too large
      - 404 unknown order, 500 storage failure
    """
    order_id = parse_order_id(payload.order_id)

    order_file = service.attach(
        session,
        order_id,
        payload.filename,
        payload.file_data,
        payload.content_type,
    )
    return FileUploadResult(storage_path=order_file.storage_path)


@router.post("/download", response_model=SignedUrlRead)
def download_file(
    payload: FileDownloadRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    storage: BlobStorage = Depends(get_storage),
):
    """
    Exchange a storage path for a signed URL valid SIGNED_URL_TTL_SECONDS.

    403 when the file is unknown or belongs to another customer.
    """
    signed_url = access_service.signed_url_for(
        session,
        current_user,
        payload.storage_path,
        storage,
        settings.SIGNED_URL_TTL_SECONDS,
    )
    return SignedUrlRead(signed_url=signed_url)
