"""
Reduction Promise DTOs
"""

import enum
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

MIN_PROMISES = 2


class TimeframeUnit(str, enum.Enum):
    """Period a reduction target applies to"""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class PromiseItem(BaseModel):
    """One reduction promise as edited on the promises step"""

    FIELD_MESSAGES: ClassVar[Dict[str, str]] = {
        "plasticItemType": "Item type required",
        "plasticItemLabel": "Item label required",
        "baselineQuantity": "Baseline must be at least 1",
        "targetQuantity": "Target must be 0 or more",
    }

    plasticItemType: str = Field(..., min_length=1)
    plasticItemLabel: str = Field(..., min_length=1)
    baselineQuantity: int = Field(..., ge=1)
    targetQuantity: int = Field(..., ge=0)
    timeframeUnit: TimeframeUnit = TimeframeUnit.MONTH
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _target_within_baseline(self) -> "PromiseItem":
        if self.targetQuantity > self.baselineQuantity:
            raise PydanticCustomError(
                "target_exceeds_baseline",
                "Target cannot be higher than the baseline",
            )
        return self

    @property
    def reductionAmount(self) -> int:
        return self.baselineQuantity - self.targetQuantity


class PromiseSet(BaseModel):
    """All promises of an audit; either none or at least two"""

    FIELD_MESSAGES: ClassVar[Dict[str, str]] = PromiseItem.FIELD_MESSAGES

    promises: List[PromiseItem] = Field(default_factory=list)

    @field_validator("promises")
    @classmethod
    def _none_or_at_least_two(cls, promises: List[PromiseItem]) -> List[PromiseItem]:
        if 0 < len(promises) < MIN_PROMISES:
            raise PydanticCustomError(
                "too_few_promises",
                "If adding promises, you must add at least 2 action items",
            )
        return promises


class PromiseOption(BaseModel):
    """An audited item with a positive daily count that a promise can target"""

    type: str
    label: str
    quantity: int


class CreatePromiseDto(BaseModel):
    """Body of POST /api/reduction-promises"""

    schoolId: str
    auditId: str
    plasticItemType: str
    plasticItemLabel: str
    baselineQuantity: int
    targetQuantity: int
    reductionAmount: int
    timeframeUnit: TimeframeUnit
    notes: str = ""

    @classmethod
    def from_item(cls, school_id: str, audit_id: str, item: PromiseItem) -> "CreatePromiseDto":
        return cls(
            schoolId=school_id,
            auditId=audit_id,
            plasticItemType=item.plasticItemType,
            plasticItemLabel=item.plasticItemLabel,
            baselineQuantity=item.baselineQuantity,
            targetQuantity=item.targetQuantity,
            reductionAmount=item.reductionAmount,
            timeframeUnit=item.timeframeUnit,
            notes=item.notes or "",
        )


class PromiseResponse(BaseModel):
    """Reduction promise row as stored by the backend"""

    id: Optional[str] = None
    schoolId: Optional[str] = None
    auditId: Optional[str] = None
    plasticItemType: str
    plasticItemLabel: str
    baselineQuantity: int
    targetQuantity: int
    reductionAmount: int
    timeframeUnit: TimeframeUnit
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class PromiseCreationStatus(str, enum.Enum):
    """Overall result of creating a batch of promises"""
    NONE = "none"
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


class PromiseSubmissionResult(BaseModel):
    """Outcome of the fan-out create calls; never rolled back"""

    status: PromiseCreationStatus
    created: List[PromiseResponse] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)  # labels of promises not created


class ItemImpact(BaseModel):
    itemType: str
    itemLabel: str
    totalReduction: float
    gramsReduced: float


class FunMetricDescriptions(BaseModel):
    seaTurtles: str
    dolphins: str
    oceanPlasticBottles: str
    plasticBags: str
    fishSaved: str


class FunMetrics(BaseModel):
    seaTurtles: float
    dolphins: float
    oceanPlasticBottles: float
    plasticBags: float
    fishSaved: float
    descriptions: FunMetricDescriptions


class SeriousMetrics(BaseModel):
    kilograms: float
    tons: float
    co2Prevented: float
    oilSaved: float
    plasticBagEquivalent: float
    yearlyOceanPlasticPrevented: float


class AggregatedImpact(BaseModel):
    """Environmental impact of a set of promises, annualised"""

    totalGramsReduced: float
    funMetrics: FunMetrics
    seriousMetrics: SeriousMetrics
    byItemType: List[ItemImpact]
