from typing import Optional

from pydantic import BaseModel


class ReviewAuditDto(BaseModel):
    approved: bool
    reviewNotes: Optional[str] = None
