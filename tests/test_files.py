import base64
import uuid

import pytest
from sqlalchemy.exc import OperationalError

from conftest import API
from orderdesk.core.errors import FileTooLarge, InvalidFilename, TooManyFiles
from orderdesk.repositories.file_repo import FileRepository
from orderdesk.repositories.order_repo import OrderRepository
from orderdesk.services.file_service import (
    ALLOWED_EXTENSIONS,
    MAX_FILE_BYTES,
    MAX_FILES_PER_ORDER,
    FileService,
    validate_filename,
)

DXF_BYTES = b"0\nSECTION\n2\nENTITIES\n0\nENDSEC\n0\nEOF\n"


def encode(data: bytes) -> str:
    return base64.b64encode(data).decode()


def upload(client, order_id, filename="part-A.dxf", data=DXF_BYTES, **extra):
    body = {
        "orderId": str(order_id),
        "filename": filename,
        "fileData": encode(data),
        "contentType": "application/dxf",
    }
    body.update(extra)
    return client.post(f"{API}/files/upload", json=body)


@pytest.fixture
def order_id(submit):
    return submit()["orderId"]


@pytest.fixture
def file_service(storage):
    return FileService(OrderRepository(), FileRepository(), storage)


def test_upload_stores_blob_and_record(client, session, storage, order_id):
    response = upload(client, order_id)

    assert response.status_code == 200
    path = f"orders/{order_id}/part-A.dxf"
    assert response.json() == {"success": True, "storagePath": path}
    assert storage.blobs[path] == (DXF_BYTES, "application/dxf")

    records = FileRepository().list_for_order(session, uuid.UUID(order_id))
    assert [r.storage_path for r in records] == [path]


def test_upload_accepts_data_url(client, storage, order_id):
    data_url = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.7").decode()

    response = upload(client, order_id, filename="drawing (rev B).pdf", fileData=data_url)

    assert response.status_code == 200
    assert storage.blobs[f"orders/{order_id}/drawing (rev B).pdf"][0] == b"%PDF-1.7"


def test_upload_to_unknown_order(client, storage):
    response = upload(client, uuid.uuid4())

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Order not found"}
    assert storage.blobs == {}


@pytest.mark.parametrize("file_data", [None, "@@not base64@@"])
def test_unknown_order_is_reported_before_file_data(client, file_data):
    response = upload(client, uuid.uuid4(), fileData=file_data)

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Order not found"}


def test_filename_is_checked_before_file_data(client, order_id):
    response = upload(client, order_id, filename="drawing.exe", fileData="@@not base64@@")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid file type.")


def test_upload_with_malformed_order_id(client):
    response = upload(client, "not-a-uuid")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid order ID"


@pytest.mark.parametrize(
    "file_data, error",
    [(None, "File data is required"), ("@@not base64@@", "Invalid file data encoding")],
)
def test_upload_with_bad_file_data(client, order_id, file_data, error):
    response = upload(client, order_id, fileData=file_data)

    assert response.status_code == 400
    assert response.json()["error"] == error


@pytest.mark.parametrize(
    "filename, error",
    [
        ("", "Invalid filename length"),
        ("x" * 252 + ".dxf", "Invalid filename length"),
        ("../secrets.dxf", "Invalid filename characters"),
        ("nested/part.dxf", "Invalid filename characters"),
        ("part;rm.dxf", "Filename contains invalid characters"),
        ("notes.txt", "Invalid file type. Allowed: " + ", ".join(ALLOWED_EXTENSIONS)),
        ("drawing.exe", "Invalid file type. Allowed: " + ", ".join(ALLOWED_EXTENSIONS)),
        ("README", "Invalid file type. Allowed: " + ", ".join(ALLOWED_EXTENSIONS)),
    ],
)
def test_filename_rules(filename, error):
    with pytest.raises(InvalidFilename) as exc_info:
        validate_filename(filename)
    assert exc_info.value.detail == error


def test_extension_check_is_case_insensitive():
    assert validate_filename("BRACKET.STEP") == "BRACKET.STEP"


def test_bad_filename_over_http(client, storage, order_id):
    response = upload(client, order_id, filename="../escape.dxf")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid filename characters"
    assert storage.blobs == {}


def test_file_too_large(session, file_service, storage, order_id):
    with pytest.raises(FileTooLarge) as exc_info:
        file_service.attach(
            session, uuid.UUID(order_id), "big.pdf", encode(b"\0" * (MAX_FILE_BYTES + 1))
        )

    assert exc_info.value.detail == "File too large (max 10MB)"
    assert storage.blobs == {}


def test_file_at_size_limit_is_accepted(session, file_service, order_id):
    record = file_service.attach(
        session, uuid.UUID(order_id), "big.pdf", encode(b"\0" * MAX_FILE_BYTES)
    )
    assert record.filename == "big.pdf"


def test_eleventh_file_is_refused(session, file_service, order_id):
    oid = uuid.UUID(order_id)
    for i in range(MAX_FILES_PER_ORDER):
        file_service.attach(session, oid, f"part-{i}.dxf", encode(DXF_BYTES))

    # The count is checked before the filename
    with pytest.raises(TooManyFiles) as exc_info:
        file_service.attach(session, oid, "../bad.exe", None)

    assert exc_info.value.detail == "Maximum 10 files per order"
    assert FileRepository().count_for_order(session, oid) == MAX_FILES_PER_ORDER


def test_storage_failure(client, session, storage, order_id):
    storage.fail_upload = True

    response = upload(client, order_id)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to upload file"}
    assert FileRepository().list_for_order(session, uuid.UUID(order_id)) == []


def test_same_filename_twice_is_refused(client, order_id):
    assert upload(client, order_id).status_code == 200

    response = upload(client, order_id)

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to upload file"


def test_metadata_failure_removes_blob(client, session, storage, order_id, monkeypatch):
    def broken_create(self, session, order_file):
        raise OperationalError("INSERT INTO order_files", {}, Exception("disk I/O error"))

    monkeypatch.setattr(FileRepository, "create", broken_create)

    response = upload(client, order_id)

    path = f"orders/{order_id}/part-A.dxf"
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to record file"}
    assert storage.removed == [path]
    assert path not in storage.blobs
    assert FileRepository().list_for_order(session, uuid.UUID(order_id)) == []


def test_metadata_failure_when_cleanup_also_fails(client, storage, order_id, monkeypatch):
    def broken_create(self, session, order_file):
        raise OperationalError("INSERT INTO order_files", {}, Exception("disk I/O error"))

    monkeypatch.setattr(FileRepository, "create", broken_create)
    storage.fail_remove = True

    response = upload(client, order_id)

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to record file"


def test_order_owner_lists_files(client, customer_headers, order_id):
    upload(client, order_id, filename="a.dxf")
    upload(client, order_id, filename="b.pdf")

    response = client.get(f"{API}/orders/{order_id}/files", headers=customer_headers)

    assert response.status_code == 200
    assert [f["filename"] for f in response.json()] == ["a.dxf", "b.pdf"]
