import enum
from typing import Optional

from pydantic import BaseModel


class FormType(str, enum.Enum):
    """Printable forms a school can hand in on paper"""
    AUDIT = "audit"
    ACTION_PLAN = "action_plan"

    @property
    def label(self) -> str:
        return "Audit form" if self is FormType.AUDIT else "Action plan"


class UploadStage(str, enum.Enum):
    VALIDATE = "validate"
    SIGNED_URL = "signed_url"
    STORAGE = "storage"
    RECORD = "record"


class SignedUrlRequest(BaseModel):
    formType: FormType
    filename: str
    fileSize: int


class SignedUrlResponse(BaseModel):
    uploadUrl: str
    objectPath: str


class CreateSubmissionDto(BaseModel):
    schoolId: str
    formType: FormType
    objectPath: str
    filename: str


class PrintableFormSubmission(BaseModel):
    """Submission record as stored by the backend"""

    id: Optional[str] = None
    schoolId: str
    formType: FormType
    objectPath: str
    filename: str
    status: Optional[str] = None

    class Config:
        from_attributes = True


class UploadResponse(BaseModel):
    message: str
    submission: PrintableFormSubmission
