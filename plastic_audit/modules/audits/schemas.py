"""
Audit DTOs (Data Transfer Objects)

Field names follow the backend's camelCase JSON so step data round-trips
unchanged. Counts are strings: the form stores whatever was typed and the
results step parses it.
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from plastic_audit.modules.reduction_promises.schemas import (
    PromiseSubmissionResult,
)
from .models import AuditStatus, LoadState
from .rooms import any_room_selected


class CountForm(BaseModel):
    """Base for steps holding item counts; a missing count reads as "0"."""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any, info) -> Any:
        if cls.model_fields[info.field_name].default != "0":
            return value
        if value is None:
            return "0"
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Part1Data(BaseModel):
    """Step 1 - About your school"""

    FIELD_MESSAGES: ClassVar[Dict[str, str]] = {
        "schoolName": "School name is required",
        "auditDate": "Audit date is required",
    }

    schoolName: str = Field(..., min_length=1)
    studentCount: Optional[str] = None
    staffCount: Optional[str] = None
    auditDate: str = Field(..., min_length=1)
    auditTeam: Optional[str] = None


class Part2Data(CountForm):
    """Step 2 - Lunchroom & staffroom daily counts"""

    lunchroomPlasticBottles: str = "0"
    lunchroomPlasticCups: str = "0"
    lunchroomPlasticCutlery: str = "0"
    lunchroomPlasticStraws: str = "0"
    lunchroomSnackWrappers: str = "0"
    lunchroomYoghurtPots: str = "0"
    lunchroomTakeawayContainers: str = "0"
    lunchroomClingFilm: str = "0"
    lunchroomOther: str = "0"
    lunchroomOtherDescription: Optional[str] = None
    staffroomPlasticBottles: str = "0"
    staffroomPlasticCups: str = "0"
    staffroomSnackWrappers: str = "0"
    staffroomYoghurtPots: str = "0"
    staffroomTakeawayContainers: str = "0"
    staffroomOther: str = "0"
    staffroomOtherDescription: Optional[str] = None
    lunchroomNotes: Optional[str] = None


class Part3Data(CountForm):
    """Step 3 - All other rooms, each behind a selection checkbox"""

    ROOT_ERROR_FIELD: ClassVar[str] = "selectedClassrooms"

    selectedClassrooms: bool = False
    selectedToilets: bool = False
    selectedOffice: bool = False
    selectedLibrary: bool = False
    selectedGym: bool = False
    selectedPlayground: bool = False
    selectedCorridors: bool = False
    selectedScienceLabs: bool = False
    selectedArtRooms: bool = False
    # Classrooms
    classroomPensPencils: str = "0"
    classroomStationery: str = "0"
    classroomDisplayMaterials: str = "0"
    classroomOther: str = "0"
    classroomOtherDescription: Optional[str] = None
    # Toilets
    toiletSoapBottles: str = "0"
    toiletBinLiners: str = "0"
    toiletCupsPaper: str = "0"
    toiletPeriodProducts: str = "0"
    toiletOther: str = "0"
    toiletOtherDescription: Optional[str] = None
    # Office
    officePlasticBottles: str = "0"
    officePlasticCups: str = "0"
    officeStationery: str = "0"
    officeOther: str = "0"
    officeOtherDescription: Optional[str] = None
    # Library
    libraryPlasticBottles: str = "0"
    libraryStationery: str = "0"
    libraryDisplayMaterials: str = "0"
    libraryOther: str = "0"
    libraryOtherDescription: Optional[str] = None
    # Gym
    gymPlasticBottles: str = "0"
    gymSportEquipment: str = "0"
    gymOther: str = "0"
    gymOtherDescription: Optional[str] = None
    # Playground
    playgroundPlasticBottles: str = "0"
    playgroundToysEquipment: str = "0"
    playgroundOther: str = "0"
    playgroundOtherDescription: Optional[str] = None
    # Corridors
    corridorsPlasticBottles: str = "0"
    corridorsDisplayMaterials: str = "0"
    corridorsBinLiners: str = "0"
    corridorsOther: str = "0"
    corridorsOtherDescription: Optional[str] = None
    # Science labs
    scienceLabsPlasticBottles: str = "0"
    scienceLabsLabEquipment: str = "0"
    scienceLabsOther: str = "0"
    scienceLabsOtherDescription: Optional[str] = None
    # Art rooms
    artRoomsPlasticBottles: str = "0"
    artRoomsArtSupplies: str = "0"
    artRoomsOther: str = "0"
    artRoomsOtherDescription: Optional[str] = None
    classroomNotes: Optional[str] = None

    @model_validator(mode="after")
    def _at_least_one_room(self) -> "Part3Data":
        if not any_room_selected(self.model_dump()):
            raise PydanticCustomError("room_selection", "Please select at least one room type")
        return self


class Part4Data(BaseModel):
    """Step 4 - Waste management practices"""

    FIELD_MESSAGES: ClassVar[Dict[str, str]] = {
        "plasticWasteDestination": "Please specify where plastic waste goes",
    }

    hasRecyclingBins: bool = False
    recyclingBinLocations: Optional[str] = None
    plasticWasteDestination: str = Field(..., min_length=1)
    compostsOrganicWaste: bool = False
    hasPlasticReductionPolicy: bool = False
    reductionPolicyDetails: Optional[str] = None
    wasteManagementNotes: Optional[str] = None


class TopPlastic(BaseModel):
    name: str
    count: int


class AuditResults(BaseModel):
    """Annualised plastic counts derived from the room counts"""

    totalPlasticItems: int
    topProblemPlastics: List[TopPlastic]
    plasticCounts: Dict[str, int]


class SchoolProfile(BaseModel):
    """The parts of a school record used to prefill step 1"""

    id: str
    name: str
    studentCount: Optional[int] = None


class AuditRecord(BaseModel):
    """Audit as stored by the backend"""

    id: str
    schoolId: Optional[str] = None
    currentPart: int = 1
    status: AuditStatus = AuditStatus.DRAFT
    part1Data: Optional[Dict[str, Any]] = None
    part2Data: Optional[Dict[str, Any]] = None
    part3Data: Optional[Dict[str, Any]] = None
    part4Data: Optional[Dict[str, Any]] = None
    resultsData: Optional[Dict[str, Any]] = None
    totalPlasticItems: Optional[int] = None
    topProblemPlastics: Optional[List[TopPlastic]] = None
    reviewNotes: Optional[str] = None

    class Config:
        from_attributes = True

    @field_validator("status", mode="before")
    @classmethod
    def _pending_is_submitted(cls, value: Any) -> Any:
        # Some backend versions call a submitted audit "pending"
        if value is None:
            return AuditStatus.DRAFT
        return AuditStatus.SUBMITTED if value == "pending" else value

    @field_validator("currentPart", mode="before")
    @classmethod
    def _resume_from_first_step(cls, value: Any) -> Any:
        return 1 if value is None else value


class AuditDraftPayload(BaseModel):
    """Body of POST /api/audits; the backend updates when id is present"""

    id: Optional[str] = None
    schoolId: str
    currentPart: int
    status: AuditStatus = AuditStatus.DRAFT
    part1Data: Dict[str, Any]
    part2Data: Dict[str, Any]
    part3Data: Dict[str, Any]
    part4Data: Dict[str, Any]
    resultsData: AuditResults
    totalPlasticItems: int
    topProblemPlastics: List[TopPlastic]


class StepValidation(BaseModel):
    step: int
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)


class StepUpdateDto(BaseModel):
    """Field values to merge into one step's form"""

    values: Dict[str, Any]


class AddPromiseDto(BaseModel):
    """Optional starting values of a new promise row"""

    values: Dict[str, Any] = Field(default_factory=dict)


class SelectPromiseItemDto(BaseModel):
    """Pick the audited item a promise row targets"""

    label: str = Field(..., min_length=1)


class SubmitAuditDto(BaseModel):
    includePromises: bool = False


class WizardStateResponse(BaseModel):
    """Snapshot of one school's wizard session"""

    schoolId: str
    auditId: Optional[str] = None
    status: AuditStatus
    editable: bool
    loadState: LoadState
    currentStep: int
    stepTitle: str
    totalSteps: int
    reviewNotes: Optional[str] = None
    part1Data: Dict[str, Any]
    part2Data: Dict[str, Any]
    part3Data: Dict[str, Any]
    part4Data: Dict[str, Any]
    promises: List[Dict[str, Any]]


class SubmissionOutcome(BaseModel):
    """Result of the final submit, including promise creation"""

    auditId: str
    status: AuditStatus
    promises: PromiseSubmissionResult
