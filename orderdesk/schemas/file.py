# orderdesk/schemas/file.py
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel


class FileUploadRequest(BaseModel):
    """
    Body of the attachment endpoint:

        {"orderId": "...", "filename": "part-A.dxf",
         "fileData": "<base64 or data URL>", "contentType": "application/dxf"}

    Everything is validated by FileService, so fields are loosely typed here.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_id: str | None = None
    filename: str | None = None
    file_data: str | None = None
    content_type: str | None = None


class FileUploadResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    storage_path: str


class FileDownloadRequest(BaseModel):
    storage_path: str | None = None


class SignedUrlRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    signed_url: str


class OrderFileRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    filename: str
    storage_path: str
    created_at: datetime
