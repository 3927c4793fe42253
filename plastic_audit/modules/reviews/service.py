"""
ReviewsService - admin approval and rejection of submitted audits
"""

import logging
from typing import List, Optional

from plastic_audit.core.api_client import SERVICE_NAME, BackendClient, json_or_none
from plastic_audit.core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from plastic_audit.core.utils import is_blank
from plastic_audit.modules.audits.schemas import AuditRecord
from .schemas import ReviewAuditDto

logger = logging.getLogger(__name__)


class ReviewsService:
    def __init__(self, client: BackendClient):
        self.client = client

    async def list_pending(self) -> List[AuditRecord]:
        """Get audits waiting for review, as the backend orders them"""
        body = await self.client.get_json("/api/admin/audits/pending")
        return [AuditRecord.model_validate(row) for row in body or []]

    async def review(
        self, audit_id: str, approved: bool, review_notes: Optional[str] = None
    ) -> AuditRecord:
        """
        Approve or reject a submitted audit.

        A rejection sends the audit back to the school, so it must say why.
        Notes given with an approval are dropped.

        Raises:
            ValidationError: If a rejection has no review notes
            NotFoundError: If the audit does not exist
            ExternalServiceError: If the backend answers without the reviewed audit
        """
        if not approved and (review_notes is None or is_blank(review_notes.strip())):
            raise ValidationError("Review notes are required when rejecting an audit")

        review = ReviewAuditDto(
            approved=approved,
            reviewNotes=None if approved else review_notes.strip(),
        )
        response = await self.client.request(
            "PUT",
            f"/api/admin/audits/{audit_id}/review",
            json=review.model_dump(exclude_none=True),
            allow_not_found=True,
        )
        if response is None:
            raise NotFoundError("Audit", audit_id)

        body = json_or_none(response)
        if not isinstance(body, dict) or not body.get("id"):
            raise ExternalServiceError(SERVICE_NAME, "review returned no audit")

        record = AuditRecord.model_validate(body)
        logger.info(f"Audit {audit_id} {'approved' if approved else 'rejected'}")
        return record
