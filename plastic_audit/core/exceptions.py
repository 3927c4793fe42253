"""
Simple exception classes for the application.
"""

from typing import Dict

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=message
        )


class StepValidationError(HTTPException):
    """Raised when one or more wizard steps fail validation.

    ``errors`` maps step number to a field -> message dict.
    """

    def __init__(self, errors: Dict[int, Dict[str, str]], message: str | None = None):
        self.errors = errors
        self.message = message or "Please fill in all required fields before continuing."
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": self.message,
                "steps": {str(step): fields for step, fields in errors.items()},
            },
        )


class NotFoundError(HTTPException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource_type} not found"
        )


class ConflictError(HTTPException):
    """Raised when there's a conflict with existing data."""

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=message)


class ExternalServiceError(HTTPException):
    """Raised when external service calls fail."""

    def __init__(self, service_name: str, message: str):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{service_name} service error: {message}",
        )


class UploadError(HTTPException):
    """Raised when a printable form upload fails at a given stage."""

    def __init__(self, stage: str, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.stage = stage
        self.message = message
        super().__init__(
            status_code=status_code,
            detail={"stage": stage, "message": message},
        )
