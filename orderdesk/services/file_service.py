# orderdesk/services/file_service.py
import base64
import binascii
import logging
import re
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from orderdesk.core.errors import (
    FileTooLarge,
    InvalidFilename,
    InvalidInput,
    NotFound,
    StorageError,
    TooManyFiles,
)
from orderdesk.core.storage_utils import BlobStorage, order_file_path
from orderdesk.models.order import OrderFile
from orderdesk.repositories.file_repo import FileRepository
from orderdesk.repositories.order_repo import OrderRepository

logger = logging.getLogger(__name__)


# --- Attachment config ---

MAX_FILE_BYTES = 10 * 1024 * 1024  # 10MB per file
MAX_FILES_PER_ORDER = 10
MAX_FILENAME_LENGTH = 255

ALLOWED_EXTENSIONS: tuple[str, ...] = (
    ".dxf",
    ".dwg",
    ".step",
    ".stp",
    ".pdf",
    ".jpg",
    ".jpeg",
    ".png",
)

FILENAME_REGEX = re.compile(r"^[A-Za-z0-9._\- ()]+$")


def parse_order_id(raw: str | None) -> uuid.UUID:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise InvalidInput("Invalid order ID")


def decode_file_data(file_data: str | None) -> bytes:
    """
    Decode the base64 payload sent by the browser.

    Accepts plain base64 or a data URL ("data:application/pdf;base64,....").
    """
    if not file_data:
        raise InvalidInput("File data is required")

    encoded = file_data.split(",", 1)[1] if "," in file_data else file_data
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInput("Invalid file data encoding")


def validate_filename(filename: str | None) -> str:
    """
    Reject anything that could escape orders/<order_id>/ or is not a
    drawing / photo we can open.
    """
    if not filename or len(filename) > MAX_FILENAME_LENGTH:
        raise InvalidFilename("Invalid filename length")

    if ".." in filename or "/" in filename or "\\" in filename:
        raise InvalidFilename("Invalid filename characters")

    if not FILENAME_REGEX.match(filename):
        raise InvalidFilename("Filename contains invalid characters")

    ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidFilename(
            f"Invalid file type. Allowed: {', '.join(ALLOWED_EXTENSIONS)}"
        )
    return filename


class FileService:
    """
    Attach customer files to an existing order.

    Blob first, metadata second. The two stores share no transaction, so
    when the metadata insert fails the freshly uploaded blob is removed
    again (best effort) before StorageError is raised.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        file_repo: FileRepository,
        storage: BlobStorage,
    ):
        self.order_repo = order_repo
        self.file_repo = file_repo
        self.storage = storage

    def attach(
        self,
        session: Session,
        order_id: uuid.UUID,
        filename: str | None,
        file_data: str | None,
        content_type: str | None = None,
    ) -> OrderFile:
        """
        Validate and store one file sent as base64 or a data URL.

        Checks, in order:
          1. order exists                     -> NotFound
          2. fewer than MAX_FILES_PER_ORDER    -> TooManyFiles
          3. filename is safe and allowed      -> InvalidFilename
          4. file data decodes                 -> InvalidInput
          5. size <= MAX_FILE_BYTES            -> FileTooLarge
        """
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            logger.info("Order not found for upload: %s", order_id)
            raise NotFound("Order not found")

        if self.file_repo.count_for_order(session, order.id) >= MAX_FILES_PER_ORDER:
            raise TooManyFiles(f"Maximum {MAX_FILES_PER_ORDER} files per order")

        validate_filename(filename)
        file_bytes = decode_file_data(file_data)

        if len(file_bytes) > MAX_FILE_BYTES:
            raise FileTooLarge("File too large (max 10MB)")

        storage_path = order_file_path(str(order.id), filename)

        try:
            self.storage.upload(
                storage_path,
                file_bytes,
                content_type or "application/octet-stream",
            )
        except Exception:
            logger.exception("File upload error: %s", storage_path)
            raise StorageError("Failed to upload file")

        try:
            order_file = self.file_repo.create(
                session,
                OrderFile(
                    order_id=order.id,
                    filename=filename,
                    storage_path=storage_path,
                ),
            )
        except SQLAlchemyError:
            logger.exception("Order file record error: %s", storage_path)
            self._discard_blob(storage_path)
            raise StorageError("Failed to record file")

        logger.info("File uploaded successfully: %s", storage_path)
        return order_file

    def _discard_blob(self, storage_path: str) -> None:
        try:
            self.storage.remove(storage_path)
        except Exception:
            logger.error(
                "Could not remove orphaned upload %s", storage_path, exc_info=True
            )
