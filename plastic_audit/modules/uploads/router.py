"""
Uploads Router - printable form PDFs handed in by schools
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile

from plastic_audit.core.api_client import BackendClient, get_backend_client
from plastic_audit.core.response_interceptor import CustomAPIRoute
from .schemas import FormType, UploadResponse
from .service import PrintableFormUploadService

router = APIRouter(prefix="/uploads", tags=["uploads"], route_class=CustomAPIRoute)


def get_upload_service(
    client: BackendClient = Depends(get_backend_client),
) -> PrintableFormUploadService:
    return PrintableFormUploadService(client)


@router.post(
    "/{school_id}/printable-forms/{form_type}",
    response_model=UploadResponse,
    status_code=201,
)
async def upload_printable_form(
    school_id: str,
    form_type: FormType,
    file: UploadFile = File(...),
    admin_pack: bool = Query(
        False, alias="adminPack", description="Admin resource pack, allowed up to the larger size limit"
    ),
    service: PrintableFormUploadService = Depends(get_upload_service),
):
    """
    Upload a completed printable form (PDF only).

    Errors carry the failing stage: validate, signed_url, storage or record.
    """
    content = await service.read_upload(file, admin_pack)
    submission = await service.upload(
        school_id=school_id,
        form_type=form_type,
        filename=file.filename or f"{form_type.value}.pdf",
        content_type=file.content_type or "",
        content=content,
        admin_pack=admin_pack,
    )
    return UploadResponse(
        message=f"{form_type.label} uploaded successfully",
        submission=submission,
    )
