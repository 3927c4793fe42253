"""
PrintableFormUploadService - completed paper forms uploaded as PDFs.

An upload runs through four stages: local validation, a signed URL from the
backend, a PUT of the raw bytes to storage and finally the submission record.
A failure stops the flow and names the stage it happened in; objects already
written to storage are not removed.
"""

import logging

from fastapi import UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from plastic_audit.core.api_client import BackendClient
from plastic_audit.core.config import config
from plastic_audit.core.exceptions import ExternalServiceError, UploadError
from .schemas import (
    CreateSubmissionDto,
    FormType,
    PrintableFormSubmission,
    SignedUrlRequest,
    SignedUrlResponse,
    UploadStage,
)

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
BYTES_PER_MB = 1024 * 1024


class PrintableFormUploadService:
    def __init__(self, client: BackendClient):
        self.client = client

    @staticmethod
    def max_bytes(admin_pack: bool = False) -> int:
        max_mb = config.admin_pack_upload_max_mb if admin_pack else config.upload_max_mb
        return max_mb * BYTES_PER_MB

    @classmethod
    def validate_file(cls, content_type: str, size: int, admin_pack: bool = False) -> None:
        """
        Check the file before anything is sent.

        Raises:
            UploadError: If the file is not a PDF or is too large
        """
        if content_type != PDF_CONTENT_TYPE:
            raise UploadError(UploadStage.VALIDATE.value, "Only PDF files are allowed")

        max_bytes = cls.max_bytes(admin_pack)
        if size > max_bytes:
            raise UploadError(
                UploadStage.VALIDATE.value,
                f"File size must be less than {max_bytes // BYTES_PER_MB}MB",
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )

    @classmethod
    async def read_upload(cls, file: UploadFile, admin_pack: bool = False) -> bytes:
        """
        Read a posted file, never holding more than the size limit plus one byte.

        The declared size is checked first when the client sent one.

        Raises:
            UploadError: If the file is not a PDF or is too large
        """
        content_type = file.content_type or ""
        cls.validate_file(content_type, file.size or 0, admin_pack)

        content = await file.read(cls.max_bytes(admin_pack) + 1)
        cls.validate_file(content_type, len(content), admin_pack)
        return content

    async def request_signed_url(
        self, form_type: FormType, filename: str, size: int
    ) -> SignedUrlResponse:
        body = SignedUrlRequest(formType=form_type, filename=filename, fileSize=size)
        try:
            response = await self.client.post_json(
                "/api/uploads/printable-forms/signed-url", body.model_dump(mode="json")
            )
            return SignedUrlResponse.model_validate(response)
        except (ExternalServiceError, PydanticValidationError) as e:
            raise UploadError(
                UploadStage.SIGNED_URL.value,
                "Could not prepare the upload. Please try again.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            ) from e

    async def record_submission(self, dto: CreateSubmissionDto) -> PrintableFormSubmission:
        try:
            response = await self.client.post_json(
                "/api/printable-form-submissions", dto.model_dump(mode="json")
            )
        except ExternalServiceError as e:
            raise UploadError(
                UploadStage.RECORD.value,
                "The file was stored but the submission could not be recorded",
                status_code=status.HTTP_502_BAD_GATEWAY,
            ) from e

        stored = dto.model_dump(mode="json")
        if isinstance(response, dict):
            stored.update(response)
        return PrintableFormSubmission.model_validate(stored)

    async def upload(
        self,
        school_id: str,
        form_type: FormType,
        filename: str,
        content_type: str,
        content: bytes,
        admin_pack: bool = False,
    ) -> PrintableFormSubmission:
        """
        Upload one printable form for a school.

        Args:
            school_id: School the form belongs to
            form_type: Audit form or action plan
            filename: Original file name, stored with the submission
            content_type: MIME type reported by the client
            content: Raw file bytes
            admin_pack: Use the larger limit for admin resource packs

        Returns:
            The recorded submission

        Raises:
            UploadError: Naming the stage that failed
        """
        self.validate_file(content_type, len(content), admin_pack)

        signed = await self.request_signed_url(form_type, filename, len(content))

        if not await self.client.put_to_signed_url(signed.uploadUrl, content, PDF_CONTENT_TYPE):
            raise UploadError(
                UploadStage.STORAGE.value,
                "Failed to upload file to storage",
                status_code=status.HTTP_502_BAD_GATEWAY,
            )

        submission = await self.record_submission(
            CreateSubmissionDto(
                schoolId=school_id,
                formType=form_type,
                objectPath=signed.objectPath,
                filename=filename,
            )
        )
        logger.info(
            f"Uploaded {form_type.value} form '{filename}' for school {school_id} to {signed.objectPath}"
        )
        return submission
