"""
Reviews Router - admin queue of submitted audits
"""

from typing import List

from fastapi import APIRouter, Depends

from plastic_audit.core.api_client import BackendClient, get_backend_client
from plastic_audit.core.response_interceptor import CustomAPIRoute
from plastic_audit.modules.audits.router import get_wizard_registry
from plastic_audit.modules.audits.schemas import AuditRecord
from plastic_audit.modules.audits.wizard import WizardRegistry
from .schemas import ReviewAuditDto
from .service import ReviewsService

router = APIRouter(prefix="/admin/audits", tags=["admin-audits"], route_class=CustomAPIRoute)


def get_reviews_service(
    client: BackendClient = Depends(get_backend_client),
) -> ReviewsService:
    return ReviewsService(client)


@router.get("/pending", response_model=List[AuditRecord])
async def get_pending_audits(service: ReviewsService = Depends(get_reviews_service)):
    """Get every submitted audit waiting for review"""
    return await service.list_pending()


@router.put("/{audit_id}/review", response_model=AuditRecord)
async def review_audit(
    audit_id: str,
    dto: ReviewAuditDto,
    service: ReviewsService = Depends(get_reviews_service),
    registry: WizardRegistry = Depends(get_wizard_registry),
):
    """
    Approve or reject an audit. Rejecting requires reviewNotes.

    The school's wizard session is dropped so its next load picks up the
    new status.
    """
    record = await service.review(audit_id, dto.approved, dto.reviewNotes)
    if record.schoolId:
        registry.discard(record.schoolId)
    return record
