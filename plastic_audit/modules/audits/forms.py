"""
Step forms: which schema validates each wizard step, the values a fresh
form starts with, and the conversion of pydantic errors into the
field -> message map shown next to the inputs.
"""

from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from plastic_audit.core.utils import today_iso
from plastic_audit.modules.reduction_promises.schemas import PromiseSet
from plastic_audit.modules.reduction_promises.service import blank_promise
from .models import WizardStep
from .schemas import Part1Data, Part2Data, Part3Data, Part4Data, StepValidation

# The results step has nothing to validate.
STEP_SCHEMAS: Dict[WizardStep, Type[BaseModel]] = {
    WizardStep.SCHOOL_INFO: Part1Data,
    WizardStep.LUNCHROOM_STAFFROOM: Part2Data,
    WizardStep.ROOMS: Part3Data,
    WizardStep.WASTE_MANAGEMENT: Part4Data,
    WizardStep.PROMISES: PromiseSet,
}

# Errors on these pydantic types are replaced by the schema's own wording
_REQUIRED_ERROR_TYPES = {"missing", "string_too_short", "greater_than_equal"}


def default_form_values(schema: Type[BaseModel]) -> Dict[str, Any]:
    """
    Initial values of a step form, without running validation.
    Required text fields start empty.
    """
    values = {}
    for name, field in schema.model_fields.items():
        if field.is_required():
            values[name] = ""
        else:
            values[name] = field.get_default(call_default_factory=True)
    return values


def school_info_defaults(school_name: str = "", student_count: Optional[int] = None) -> Dict[str, Any]:
    values = default_form_values(Part1Data)
    values.update(
        schoolName=school_name,
        studentCount="" if student_count is None else str(student_count),
        staffCount="",
        auditDate=today_iso(),
        auditTeam="",
    )
    return values


def promises_defaults() -> list:
    """The promises step opens with the two rows the minimum requires."""
    return [blank_promise(), blank_promise()]


def collect_field_errors(
    exc: PydanticValidationError, schema: Type[BaseModel]
) -> Dict[str, str]:
    """
    Flatten a pydantic error into {"field.path": message}.

    Only the first error of each field is kept. Model-level errors land on
    the schema's ROOT_ERROR_FIELD.
    """
    messages: Mapping[str, str] = getattr(schema, "FIELD_MESSAGES", {})
    root_field = getattr(schema, "ROOT_ERROR_FIELD", "__root__")

    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error["loc"]
        path = ".".join(str(part) for part in loc) or root_field
        field_name = next((part for part in reversed(loc) if isinstance(part, str)), None)

        message = error["msg"]
        if error["type"] in _REQUIRED_ERROR_TYPES and field_name in messages:
            message = messages[field_name]
        errors.setdefault(path, message)
    return errors


def validate_form(step: WizardStep, values: Any) -> StepValidation:
    schema = STEP_SCHEMAS.get(step)
    if schema is None:
        return StepValidation(step=step, valid=True)

    try:
        schema.model_validate(values)
    except PydanticValidationError as e:
        return StepValidation(step=step, valid=False, errors=collect_field_errors(e, schema))
    return StepValidation(step=step, valid=True)
