"""Printable form uploads module"""

from .schemas import FormType, PrintableFormSubmission
from .service import PrintableFormUploadService
from .router import router

__all__ = ["FormType", "PrintableFormSubmission", "PrintableFormUploadService", "router"]
