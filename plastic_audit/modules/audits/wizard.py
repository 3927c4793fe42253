"""
Audit wizard sessions.

A WizardController holds one school's in-progress audit: the step it is on,
the values of every step form and the id of the backend draft once the
first save succeeded. Forms are only validated and persisted on explicit
actions (save, next, submit); moving back never loses what was typed.
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from plastic_audit.core.api_client import BackendClient
from plastic_audit.core.config import config
from plastic_audit.core.exceptions import (
    ConflictError,
    NotFoundError,
    StepValidationError,
    ValidationError,
)
from plastic_audit.modules.reduction_promises.schemas import PromiseItem, PromiseOption
from plastic_audit.modules.reduction_promises.service import (
    ReductionPromisesService,
    blank_promise,
    extract_promise_options,
    promise_to_form,
)
from .forms import (
    STEP_SCHEMAS,
    default_form_values,
    promises_defaults,
    school_info_defaults,
    validate_form,
)
from .metrics import calculate_results
from .models import FIRST_STEP, LAST_STEP, AuditStatus, LoadState, WizardStep
from .rooms import apply_room_inference
from .schemas import (
    AuditDraftPayload,
    AuditRecord,
    AuditResults,
    Part2Data,
    Part3Data,
    Part4Data,
    StepValidation,
    SubmissionOutcome,
    WizardStateResponse,
)
from .service import AuditsService

logger = logging.getLogger(__name__)

SUBMIT_STEPS = (
    WizardStep.SCHOOL_INFO,
    WizardStep.LUNCHROOM_STAFFROOM,
    WizardStep.ROOMS,
    WizardStep.WASTE_MANAGEMENT,
)


@dataclass
class AuditDraftState:
    """Values of every step form, one named section per step"""

    school_info: Dict[str, Any] = field(default_factory=school_info_defaults)
    lunchroom_staffroom: Dict[str, Any] = field(default_factory=lambda: default_form_values(Part2Data))
    rooms: Dict[str, Any] = field(default_factory=lambda: default_form_values(Part3Data))
    waste_management: Dict[str, Any] = field(default_factory=lambda: default_form_values(Part4Data))
    promises: List[Dict[str, Any]] = field(default_factory=promises_defaults)

    def section(self, step: WizardStep) -> Dict[str, Any]:
        if step == WizardStep.SCHOOL_INFO:
            return self.school_info
        if step == WizardStep.LUNCHROOM_STAFFROOM:
            return self.lunchroom_staffroom
        if step == WizardStep.ROOMS:
            return self.rooms
        if step == WizardStep.WASTE_MANAGEMENT:
            return self.waste_management
        raise ValueError(f"Step {int(step)} has no form section")

    def form_values(self, step: WizardStep) -> Any:
        if step == WizardStep.RESULTS:
            return None
        if step == WizardStep.PROMISES:
            return {"promises": self.promises}
        return self.section(step)

    def count_values(self) -> Dict[str, Any]:
        """Everything the results and promise options are computed from"""
        return {**self.lunchroom_staffroom, **self.rooms}


class WizardController:
    """
    Multi-step plastic waste audit for one school.

    Validation failures raise StepValidationError before any backend call;
    backend failures raise ExternalServiceError and leave every form value
    in place so the action can simply be repeated.

    Edits are refused until the session has been loaded. Loading, saving,
    moving forward and submitting hold the session lock, so concurrent
    requests for one school run one after the other.
    """

    def __init__(
        self,
        school_id: str,
        audits: AuditsService,
        promises: ReductionPromisesService,
    ):
        self.school_id = school_id
        self.audits = audits
        self.promises_service = promises
        self.current_step = FIRST_STEP
        self.audit_id: Optional[str] = None
        self.status = AuditStatus.DRAFT
        self.review_notes: Optional[str] = None
        self.load_state = LoadState.NOT_LOADED
        self.state = AuditDraftState()
        self._lock = asyncio.Lock()

    # Loading

    async def load_existing(self) -> None:
        """
        Populate the session from the backend, once.

        Resumes the school's audit when there is one; otherwise prefills
        the school name and student count from the school record. Later
        calls keep editable sessions as they are so a refetch cannot
        overwrite unsaved edits. A submitted or approved session picks up
        its current status instead, which is how a review made elsewhere
        reaches it.
        """
        async with self._lock:
            await self._load()

    async def _load(self) -> None:
        if self.load_state is LoadState.LOADED:
            if not self.editable:
                await self._refresh_status()
            return

        existing = await self.audits.find_for_school(self.school_id)
        if existing:
            stored_promises = await self.promises_service.list_for_audit(existing.id)
            self._restore(existing)
            if stored_promises:
                self.state.promises = [promise_to_form(p) for p in stored_promises]
            logger.info(
                f"Resumed audit {existing.id} for school {self.school_id} at step {int(self.current_step)}"
            )
        else:
            school = await self.audits.get_school(self.school_id)
            self.state.school_info = school_info_defaults(school.name, school.studentCount)

        self.load_state = LoadState.LOADED

    async def _refresh_status(self) -> None:
        record = await self.audits.find_for_school(self.school_id)
        if record is None or record.id != self.audit_id or record.status is self.status:
            return
        logger.info(
            f"Audit {record.id} for school {self.school_id} is now {record.status.value} (was {self.status.value})"
        )
        self._restore(record)

    def _restore(self, record: AuditRecord) -> None:
        self.audit_id = record.id
        self.status = record.status
        self.review_notes = record.reviewNotes
        self.current_step = WizardStep(min(max(record.currentPart, FIRST_STEP), LAST_STEP))

        if record.part1Data:
            self.state.school_info = {**self.state.school_info, **record.part1Data}
        if record.part2Data:
            self.state.lunchroom_staffroom = {**self.state.lunchroom_staffroom, **record.part2Data}
        if record.part3Data:
            self.state.rooms = {**self.state.rooms, **apply_room_inference(record.part3Data)}
        if record.part4Data:
            self.state.waste_management = {**self.state.waste_management, **record.part4Data}

    # Editing

    @property
    def editable(self) -> bool:
        return self.status.editable

    def _ensure_loaded(self) -> None:
        if self.load_state is LoadState.NOT_LOADED:
            raise ConflictError("Load the audit before changing it")

    def _ensure_editable(self) -> None:
        self._ensure_loaded()
        if not self.editable:
            raise ConflictError(f"This audit is {self.status.value} and can no longer be edited")

    def update_step(self, step: int, values: Dict[str, Any]) -> None:
        """
        Merge typed values into a step form. Nothing is validated here.

        Raises:
            ValidationError: For the results step or unknown field names
        """
        self._ensure_editable()
        step = _as_step(step)

        if step == WizardStep.RESULTS:
            raise ValidationError("The results step has no fields")

        if step == WizardStep.PROMISES:
            promises = values.get("promises")
            if not isinstance(promises, list) or not all(isinstance(p, dict) for p in promises):
                raise ValidationError("promises must be a list of promise objects")
            self.state.promises = [{**blank_promise(), **p} for p in promises]
            return

        unknown = sorted(set(values) - set(STEP_SCHEMAS[step].model_fields))
        if unknown:
            raise ValidationError(f"Unknown fields for step {int(step)}: {', '.join(unknown)}")
        self.state.section(step).update(values)

    def validate_step(self, step: int) -> StepValidation:
        return validate_form(_as_step(step), self.state.form_values(_as_step(step)))

    def results(self) -> AuditResults:
        return calculate_results(self.state.count_values())

    # Navigation and persistence

    async def save_progress(self) -> AuditRecord:
        """
        Validate the active step, then save every step as a draft.

        Raises:
            StepValidationError: If the active step is invalid (nothing is sent)
        """
        async with self._lock:
            await self._load()
            return await self._save_progress()

    async def _save_progress(self) -> AuditRecord:
        self._ensure_editable()
        validation = self.validate_step(self.current_step)
        if not validation.valid:
            raise StepValidationError({validation.step: validation.errors})
        return await self._persist()

    async def _persist(self) -> AuditRecord:
        results = self.results()
        payload = AuditDraftPayload(
            id=self.audit_id,
            schoolId=self.school_id,
            currentPart=int(self.current_step),
            status=AuditStatus.DRAFT,
            part1Data=dict(self.state.school_info),
            part2Data=dict(self.state.lunchroom_staffroom),
            part3Data=dict(self.state.rooms),
            part4Data=dict(self.state.waste_management),
            resultsData=results,
            totalPlasticItems=results.totalPlasticItems,
            topProblemPlastics=results.topProblemPlastics,
        )
        record = await self.audits.save(payload)
        if self.audit_id is None:
            self.audit_id = record.id
        self.status = record.status
        return record

    async def advance(self) -> None:
        async with self._lock:
            await self._load()
            await self._save_progress()
            if self.current_step < LAST_STEP:
                self.current_step = WizardStep(self.current_step + 1)

    def retreat(self) -> None:
        self._ensure_loaded()
        if self.current_step > FIRST_STEP:
            self.current_step = WizardStep(self.current_step - 1)

    def revise(self) -> None:
        """Reopen a rejected audit from the first step."""
        self._ensure_loaded()
        if self.status is not AuditStatus.REJECTED:
            raise ConflictError("Only audits that need revision can be revised")
        self.current_step = FIRST_STEP

    async def submit_final(self, include_promises: bool = False) -> SubmissionOutcome:
        """
        Send the audit for review, then create its reduction promises.

        Every step is validated first; any failure aborts before the
        backend is called. Promise creation starts only once the submit
        call succeeded and may end up partial.

        Raises:
            StepValidationError: With the errors of every invalid step
        """
        async with self._lock:
            await self._load()
            self._ensure_editable()

            steps = SUBMIT_STEPS + ((WizardStep.PROMISES,) if include_promises else ())
            failures = {}
            for step in steps:
                validation = self.validate_step(step)
                if not validation.valid:
                    failures[int(step)] = validation.errors
            if failures:
                raise StepValidationError(failures, "Please fix the highlighted steps before submitting.")

            # Taken before the first await: rows edited meanwhile are not sent
            items = []
            if include_promises:
                items = [PromiseItem.model_validate(p) for p in self.state.promises]

            await self._persist()
            await self.audits.submit(self.audit_id)
            self.status = AuditStatus.SUBMITTED

            promise_result = await self.promises_service.create_all(self.school_id, self.audit_id, items)

            return SubmissionOutcome(auditId=self.audit_id, status=self.status, promises=promise_result)

    async def download_results_pdf(self) -> bytes:
        async with self._lock:
            await self._load()
            if self.editable:
                await self._save_progress()
            if self.audit_id is None:
                raise NotFoundError("Audit", self.school_id)
            return await self.audits.download_results_pdf(self.audit_id)

    # Reduction promises

    def promise_options(self) -> List[PromiseOption]:
        return extract_promise_options(self.state.count_values())

    def add_promise(self, values: Optional[Dict[str, Any]] = None) -> None:
        self._ensure_editable()
        self.state.promises.append({**blank_promise(), **(values or {})})

    def remove_promise(self, index: int) -> None:
        self._ensure_editable()
        self._promise_row(index)
        del self.state.promises[index]

    def select_promise_item(self, index: int, label: str) -> None:
        """Point a promise row at an audited item and prefill its baseline."""
        self._ensure_editable()
        row = self._promise_row(index)
        option = next((o for o in self.promise_options() if o.label == label), None)
        if option is None:
            raise ValidationError(f"'{label}' was not recorded in this audit")
        row.update(
            plasticItemType=option.type,
            plasticItemLabel=option.label,
            baselineQuantity=option.quantity,
        )

    def _promise_row(self, index: int) -> Dict[str, Any]:
        if not 0 <= index < len(self.state.promises):
            raise NotFoundError("Promise", index)
        return self.state.promises[index]

    def snapshot(self) -> WizardStateResponse:
        return WizardStateResponse(
            schoolId=self.school_id,
            auditId=self.audit_id,
            status=self.status,
            editable=self.editable,
            loadState=self.load_state,
            currentStep=int(self.current_step),
            stepTitle=self.current_step.title,
            totalSteps=int(LAST_STEP),
            reviewNotes=self.review_notes,
            part1Data=self.state.school_info,
            part2Data=self.state.lunchroom_staffroom,
            part3Data=self.state.rooms,
            part4Data=self.state.waste_management,
            promises=self.state.promises,
        )


def _as_step(step: int) -> WizardStep:
    try:
        return WizardStep(step)
    except ValueError:
        raise NotFoundError("Step", step) from None


class WizardRegistry:
    """
    In-memory wizard sessions, one per school.

    Holds at most max_sessions; the least recently used session is dropped
    to make room, losing its unsaved edits.
    """

    def __init__(self, client: BackendClient, max_sessions: Optional[int] = None):
        self.audits = AuditsService(client)
        self.promises = ReductionPromisesService(client)
        self.max_sessions = max_sessions or config.wizard_max_sessions
        self._sessions: "OrderedDict[str, WizardController]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, school_id: str) -> WizardController:
        session = self._sessions.get(school_id)
        if session is not None:
            self._sessions.move_to_end(school_id)
            return session

        session = WizardController(school_id, self.audits, self.promises)
        self._sessions[school_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Dropped idle wizard session for school {evicted}")
        return session

    def discard(self, school_id: str) -> None:
        self._sessions.pop(school_id, None)
