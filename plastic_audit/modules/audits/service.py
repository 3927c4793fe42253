"""
AuditsService - audit and school calls against the platform backend
"""

import logging
from typing import Optional

from plastic_audit.core.api_client import BackendClient
from plastic_audit.core.exceptions import ExternalServiceError, NotFoundError
from .schemas import AuditDraftPayload, AuditRecord, SchoolProfile

logger = logging.getLogger(__name__)


class AuditsService:
    """
    Audit persistence lives in the backend; this service only knows its
    endpoints and the shapes they exchange.
    """

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_school(self, school_id: str) -> SchoolProfile:
        """
        Get the school record used to prefill a new audit.

        Raises:
            NotFoundError: If the school does not exist
        """
        body = await self.client.get_json(f"/api/schools/{school_id}", allow_not_found=True)
        if not body:
            raise NotFoundError("School", school_id)
        return SchoolProfile.model_validate(body)

    async def find_for_school(self, school_id: str) -> Optional[AuditRecord]:
        """
        Get the school's audit, whatever its status.

        Returns:
            The audit, or None when the school has not started one
        """
        body = await self.client.get_json(
            f"/api/audits/school/{school_id}", allow_not_found=True
        )
        if not body:
            return None
        return AuditRecord.model_validate(body)

    async def save(self, payload: AuditDraftPayload) -> AuditRecord:
        """
        Create or update a draft. The backend updates when the payload
        carries an id and creates otherwise.

        Returns:
            The stored audit, including its id
        """
        exclude = {"id"} if payload.id is None else None
        body = await self.client.post_json(
            "/api/audits", payload.model_dump(mode="json", exclude=exclude)
        )
        if not isinstance(body, dict) or not body.get("id"):
            raise ExternalServiceError("Platform API", "audit was saved without an id")

        record = AuditRecord.model_validate(body)
        logger.info(
            f"Saved audit {record.id} for school {payload.schoolId} at step {payload.currentPart}"
        )
        return record

    async def submit(self, audit_id: str) -> None:
        """Move the audit into the review queue."""
        await self.client.post_json(f"/api/audits/{audit_id}/submit")
        logger.info(f"Submitted audit {audit_id} for review")

    async def download_results_pdf(self, audit_id: str) -> bytes:
        return await self.client.get_bytes(f"/api/audits/{audit_id}/results-pdf")
