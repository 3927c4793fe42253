"""
Wizard Router - API endpoints driving one school's plastic waste audit
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response

from plastic_audit.core.response_interceptor import CustomAPIRoute, skip_interceptor
from plastic_audit.modules.reduction_promises.schemas import PromiseOption
from .schemas import (
    AddPromiseDto,
    AuditResults,
    SelectPromiseItemDto,
    StepUpdateDto,
    StepValidation,
    SubmissionOutcome,
    SubmitAuditDto,
    WizardStateResponse,
)
from .wizard import WizardController, WizardRegistry

router = APIRouter(prefix="/wizard", tags=["wizard"], route_class=CustomAPIRoute)


def get_wizard_registry(request: Request) -> WizardRegistry:
    return request.app.state.wizard_registry


async def get_wizard(
    school_id: str, registry: WizardRegistry = Depends(get_wizard_registry)
) -> WizardController:
    """The school's session, loaded from the backend before first use"""
    wizard = registry.get(school_id)
    await wizard.load_existing()
    return wizard


@router.get("/{school_id}", response_model=WizardStateResponse)
async def get_wizard_state(wizard: WizardController = Depends(get_wizard)):
    """
    Get the current state of the school's audit session.
    """
    return wizard.snapshot()


@router.delete("/{school_id}")
async def discard_wizard(
    school_id: str, registry: WizardRegistry = Depends(get_wizard_registry)
):
    """
    Drop the in-memory session. Unsaved edits are lost; the next load
    starts again from what the backend has.
    """
    registry.discard(school_id)
    return {"message": "Session discarded"}


@router.post("/{school_id}/load", response_model=WizardStateResponse)
async def load_wizard(wizard: WizardController = Depends(get_wizard)):
    """
    Resume the school's audit, or prefill a new one from the school record.
    Unsaved edits are kept; a submitted audit picks up its review status.
    """
    return wizard.snapshot()


@router.patch("/{school_id}/steps/{step}", response_model=WizardStateResponse)
async def update_step(
    step: int, dto: StepUpdateDto, wizard: WizardController = Depends(get_wizard)
):
    """
    Merge field values into one step's form without validating or saving.
    """
    wizard.update_step(step, dto.values)
    return wizard.snapshot()


@router.get("/{school_id}/steps/{step}/validation", response_model=StepValidation)
async def validate_step(step: int, wizard: WizardController = Depends(get_wizard)):
    return wizard.validate_step(step)


@router.post("/{school_id}/save", response_model=WizardStateResponse)
async def save_progress(wizard: WizardController = Depends(get_wizard)):
    """
    Validate the current step and save the whole audit as a draft.
    """
    await wizard.save_progress()
    return wizard.snapshot()


@router.post("/{school_id}/next", response_model=WizardStateResponse)
async def next_step(wizard: WizardController = Depends(get_wizard)):
    """
    Save progress, then move to the next step.
    """
    await wizard.advance()
    return wizard.snapshot()


@router.post("/{school_id}/back", response_model=WizardStateResponse)
async def previous_step(wizard: WizardController = Depends(get_wizard)):
    wizard.retreat()
    return wizard.snapshot()


@router.post("/{school_id}/revise", response_model=WizardStateResponse)
async def revise_audit(wizard: WizardController = Depends(get_wizard)):
    wizard.revise()
    return wizard.snapshot()


@router.get("/{school_id}/results", response_model=AuditResults)
async def get_results(wizard: WizardController = Depends(get_wizard)):
    """
    Annualised results computed from the current, possibly unsaved, values.
    """
    return wizard.results()


@router.get("/{school_id}/promise-options", response_model=List[PromiseOption])
async def get_promise_options(wizard: WizardController = Depends(get_wizard)):
    return wizard.promise_options()


@router.post("/{school_id}/promises", response_model=WizardStateResponse)
async def add_promise(dto: AddPromiseDto, wizard: WizardController = Depends(get_wizard)):
    wizard.add_promise(dto.values)
    return wizard.snapshot()


@router.delete("/{school_id}/promises/{index}", response_model=WizardStateResponse)
async def remove_promise(index: int, wizard: WizardController = Depends(get_wizard)):
    wizard.remove_promise(index)
    return wizard.snapshot()


@router.post("/{school_id}/promises/{index}/item", response_model=WizardStateResponse)
async def select_promise_item(
    index: int, dto: SelectPromiseItemDto, wizard: WizardController = Depends(get_wizard)
):
    """
    Target an audited item with a promise row; its daily count becomes the baseline.
    """
    wizard.select_promise_item(index, dto.label)
    return wizard.snapshot()


@router.post("/{school_id}/submit", response_model=SubmissionOutcome)
async def submit_audit(dto: SubmitAuditDto, wizard: WizardController = Depends(get_wizard)):
    """
    Validate every step and send the audit for review.

    With includePromises, the reduction promises are created afterwards.
    A partial promise failure is reported in the response, not raised:
    the audit itself is already submitted by then.
    """
    return await wizard.submit_final(include_promises=dto.includePromises)


@router.get("/{school_id}/results-pdf")
@skip_interceptor
async def download_results_pdf(wizard: WizardController = Depends(get_wizard)):
    """
    Save progress and return the results PDF rendered by the backend.
    """
    content = await wizard.download_results_pdf()
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="audit-results.pdf"'},
    )
