"""Admin audit review module"""

from .schemas import ReviewAuditDto
from .service import ReviewsService
from .router import router

__all__ = ["ReviewAuditDto", "ReviewsService", "router"]
