import io

import pytest
from starlette.datastructures import Headers, UploadFile

from plastic_audit.core.config import config
from plastic_audit.core.exceptions import UploadError
from plastic_audit.modules.uploads import FormType, PrintableFormUploadService
from plastic_audit.modules.uploads.service import BYTES_PER_MB

PDF = b"%PDF-1.4 completed audit form"


def pdf_upload(content, size=None):
    return UploadFile(
        io.BytesIO(content),
        size=size,
        filename="form.pdf",
        headers=Headers({"content-type": "application/pdf"}),
    )


@pytest.mark.asyncio
async def test_upload_runs_every_stage(backend, backend_client):
    service = PrintableFormUploadService(backend_client)

    submission = await service.upload(
        "school-1", FormType.AUDIT, "audit.pdf", "application/pdf", PDF
    )

    assert submission.objectPath == "/objects/printable-forms/object-1"
    assert submission.formType is FormType.AUDIT
    assert submission.id
    assert backend.body_of("POST", "/api/uploads/printable-forms/signed-url") == {
        "formType": "audit",
        "filename": "audit.pdf",
        "fileSize": len(PDF),
    }
    assert backend.stored_objects == {"/bucket/object-1": PDF}
    assert backend.body_of("POST", "/api/printable-form-submissions") == {
        "schoolId": "school-1",
        "formType": "audit",
        "objectPath": "/objects/printable-forms/object-1",
        "filename": "audit.pdf",
    }


@pytest.mark.asyncio
async def test_only_pdfs_are_accepted(backend, backend_client):
    service = PrintableFormUploadService(backend_client)

    with pytest.raises(UploadError) as exc_info:
        await service.upload("school-1", FormType.AUDIT, "audit.png", "image/png", b"png")

    assert exc_info.value.stage == "validate"
    assert exc_info.value.message == "Only PDF files are allowed"
    assert backend.requests == []


@pytest.mark.asyncio
async def test_size_limit(backend, backend_client):
    service = PrintableFormUploadService(backend_client)
    content = b"0" * (10 * 1024 * 1024 + 1)

    with pytest.raises(UploadError) as exc_info:
        await service.upload("school-1", FormType.ACTION_PLAN, "plan.pdf", "application/pdf", content)

    assert exc_info.value.message == "File size must be less than 10MB"
    assert exc_info.value.status_code == 413
    assert backend.requests == []


def test_admin_packs_have_a_larger_limit():
    size = 15 * 1024 * 1024

    PrintableFormUploadService.validate_file("application/pdf", size, admin_pack=True)
    with pytest.raises(UploadError):
        PrintableFormUploadService.validate_file("application/pdf", size)


@pytest.mark.asyncio
async def test_signed_url_failure(backend, backend_client):
    backend.fail("POST", "/api/uploads/printable-forms/signed-url")

    with pytest.raises(UploadError) as exc_info:
        await PrintableFormUploadService(backend_client).upload(
            "school-1", FormType.AUDIT, "audit.pdf", "application/pdf", PDF
        )

    assert exc_info.value.stage == "signed_url"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_storage_failure_stops_before_recording(backend, backend_client):
    backend.storage_fails = True

    with pytest.raises(UploadError) as exc_info:
        await PrintableFormUploadService(backend_client).upload(
            "school-1", FormType.AUDIT, "audit.pdf", "application/pdf", PDF
        )

    assert exc_info.value.stage == "storage"
    assert exc_info.value.message == "Failed to upload file to storage"
    assert backend.calls("POST", "/api/printable-form-submissions") == []


@pytest.mark.asyncio
async def test_record_failure_names_its_stage(backend, backend_client):
    backend.fail("POST", "/api/printable-form-submissions")

    with pytest.raises(UploadError) as exc_info:
        await PrintableFormUploadService(backend_client).upload(
            "school-1", FormType.ACTION_PLAN, "plan.pdf", "application/pdf", PDF
        )

    assert exc_info.value.stage == "record"
    assert backend.stored_objects


@pytest.mark.asyncio
async def test_read_stops_just_past_the_limit(monkeypatch):
    monkeypatch.setattr(config, "upload_max_mb", 1)
    file = pdf_upload(b"0" * (3 * BYTES_PER_MB))

    with pytest.raises(UploadError) as exc_info:
        await PrintableFormUploadService.read_upload(file)

    assert exc_info.value.status_code == 413
    assert exc_info.value.message == "File size must be less than 1MB"
    assert file.file.tell() == BYTES_PER_MB + 1


@pytest.mark.asyncio
async def test_declared_size_is_checked_before_reading():
    file = pdf_upload(PDF, size=11 * BYTES_PER_MB)

    with pytest.raises(UploadError) as exc_info:
        await PrintableFormUploadService.read_upload(file)

    assert exc_info.value.status_code == 413
    assert file.file.tell() == 0


@pytest.mark.asyncio
async def test_admin_pack_reads_up_to_the_larger_limit(monkeypatch):
    monkeypatch.setattr(config, "upload_max_mb", 1)
    monkeypatch.setattr(config, "admin_pack_upload_max_mb", 2)
    content = b"0" * (BYTES_PER_MB + 10)

    assert await PrintableFormUploadService.read_upload(pdf_upload(content), admin_pack=True) == content
