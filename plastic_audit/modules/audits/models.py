"""
Audit enums shared by the wizard, the backend client and the routes
"""

import enum


class AuditStatus(str, enum.Enum):
    """Review status of an audit record"""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def editable(self) -> bool:
        return self in (AuditStatus.DRAFT, AuditStatus.REJECTED)


class WizardStep(enum.IntEnum):
    SCHOOL_INFO = 1
    LUNCHROOM_STAFFROOM = 2
    ROOMS = 3
    WASTE_MANAGEMENT = 4
    RESULTS = 5
    PROMISES = 6

    @property
    def title(self) -> str:
        return STEP_TITLES[self]


STEP_TITLES = {
    WizardStep.SCHOOL_INFO: "About Your School",
    WizardStep.LUNCHROOM_STAFFROOM: "Lunchroom & Staffroom",
    WizardStep.ROOMS: "All Rooms",
    WizardStep.WASTE_MANAGEMENT: "Waste Management",
    WizardStep.RESULTS: "Audit Results",
    WizardStep.PROMISES: "Reduction Promises (Optional)",
}

FIRST_STEP = WizardStep.SCHOOL_INFO
LAST_STEP = WizardStep.PROMISES


class LoadState(str, enum.Enum):
    """Whether a wizard session has been populated from the backend yet"""
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
