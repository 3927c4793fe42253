"""
ReductionPromisesService - options, creation and listing of reduction promises
"""

import asyncio
import logging
from typing import Any, List, Mapping, Sequence, Tuple

from plastic_audit.core.api_client import BackendClient
from plastic_audit.core.exceptions import ExternalServiceError
from plastic_audit.core.utils import parse_count
from .schemas import (
    CreatePromiseDto,
    PromiseCreationStatus,
    PromiseItem,
    PromiseOption,
    PromiseResponse,
    PromiseSubmissionResult,
)

logger = logging.getLogger(__name__)

# (form field, item type, label) in the order options are offered.
# Unlike the results categories, every room keeps its own entry.
PROMISE_ITEM_SOURCES: Tuple[Tuple[str, str, str], ...] = (
    ("lunchroomPlasticBottles", "plastic_bottles", "Plastic Bottles (Lunchroom)"),
    ("staffroomPlasticBottles", "plastic_bottles", "Plastic Bottles (Staffroom)"),
    ("lunchroomPlasticCups", "plastic_cups", "Plastic Cups (Lunchroom)"),
    ("staffroomPlasticCups", "plastic_cups", "Plastic Cups (Staffroom)"),
    ("lunchroomPlasticCutlery", "plastic_cutlery", "Plastic Cutlery"),
    ("lunchroomPlasticStraws", "plastic_straws", "Plastic Straws"),
    ("lunchroomSnackWrappers", "snack_wrappers", "Snack Wrappers (Lunchroom)"),
    ("staffroomSnackWrappers", "snack_wrappers", "Snack Wrappers (Staffroom)"),
    ("lunchroomYoghurtPots", "yoghurt_pots", "Yoghurt Pots (Lunchroom)"),
    ("staffroomYoghurtPots", "yoghurt_pots", "Yoghurt Pots (Staffroom)"),
    ("lunchroomTakeawayContainers", "takeaway_containers", "Takeaway Containers (Lunchroom)"),
    ("staffroomTakeawayContainers", "takeaway_containers", "Takeaway Containers (Staffroom)"),
    ("lunchroomClingFilm", "cling_film", "Cling Film"),
    ("classroomPensPencils", "pens_pencils", "Pens & Pencils"),
    ("classroomStationery", "stationery", "Stationery Items (Classroom)"),
    ("classroomDisplayMaterials", "display_materials", "Display Materials (Classroom)"),
    ("toiletSoapBottles", "soap_bottles", "Soap Bottles"),
    ("toiletBinLiners", "bin_liners", "Bin Liners (Toilet)"),
    ("toiletCupsPaper", "cups_dispensers", "Cups/Dispensers"),
    ("toiletPeriodProducts", "period_products", "Period Products"),
    ("officePlasticBottles", "plastic_bottles", "Plastic Bottles (Office)"),
    ("officePlasticCups", "plastic_cups", "Plastic Cups (Office)"),
    ("officeStationery", "stationery", "Stationery (Office)"),
    ("libraryPlasticBottles", "plastic_bottles", "Plastic Bottles (Library)"),
    ("libraryStationery", "stationery", "Stationery (Library)"),
    ("libraryDisplayMaterials", "display_materials", "Display Materials (Library)"),
    ("gymPlasticBottles", "plastic_bottles", "Plastic Bottles (Gym)"),
    ("gymSportEquipment", "sport_equipment", "Sport Equipment"),
    ("playgroundPlasticBottles", "plastic_bottles", "Plastic Bottles (Playground)"),
    ("playgroundToysEquipment", "toys_equipment", "Toys/Equipment (Playground)"),
    ("corridorsPlasticBottles", "plastic_bottles", "Plastic Bottles (Corridors)"),
    ("corridorsDisplayMaterials", "display_materials", "Display Materials (Corridors)"),
    ("corridorsBinLiners", "bin_liners", "Bin Liners (Corridors)"),
    ("scienceLabsPlasticBottles", "plastic_bottles", "Plastic Bottles (Science Labs)"),
    ("scienceLabsLabEquipment", "lab_equipment", "Lab Equipment"),
    ("artRoomsPlasticBottles", "plastic_bottles", "Plastic Bottles (Art Rooms)"),
    ("artRoomsArtSupplies", "art_supplies", "Art Supplies"),
)


def extract_promise_options(values: Mapping[str, Any]) -> List[PromiseOption]:
    """
    List the audited items a promise can target.

    Args:
        values: Union of the lunchroom/staffroom and rooms step values

    Returns:
        Items with a positive daily count, one entry per room occurrence
    """
    options = []
    for field, item_type, label in PROMISE_ITEM_SOURCES:
        quantity = parse_count(values.get(field))
        if quantity > 0:
            options.append(PromiseOption(type=item_type, label=label, quantity=quantity))
    return options


def blank_promise() -> dict:
    """Form values of an empty promise row"""
    return {
        "plasticItemType": "",
        "plasticItemLabel": "",
        "baselineQuantity": 0,
        "targetQuantity": 0,
        "timeframeUnit": "month",
        "notes": "",
    }


def promise_to_form(promise: PromiseResponse) -> dict:
    """Form values of a promise already stored by the backend"""
    return {
        "plasticItemType": promise.plasticItemType,
        "plasticItemLabel": promise.plasticItemLabel,
        "baselineQuantity": promise.baselineQuantity,
        "targetQuantity": promise.targetQuantity,
        "timeframeUnit": promise.timeframeUnit.value,
        "notes": promise.notes or "",
    }


class ReductionPromisesService:
    """
    Reduction promises against the platform backend.
    Creation is a fan-out of independent calls with no rollback.
    """

    def __init__(self, client: BackendClient):
        self.client = client

    async def list_for_audit(self, audit_id: str) -> List[PromiseResponse]:
        """
        Get the promises already stored for an audit.

        Returns:
            List of promises (empty when none)
        """
        body = await self.client.get_json(
            f"/api/reduction-promises/audit/{audit_id}", allow_not_found=True
        )
        return [PromiseResponse.model_validate(row) for row in body or []]

    async def create(self, dto: CreatePromiseDto) -> PromiseResponse:
        body = await self.client.post_json("/api/reduction-promises", dto.model_dump(mode="json"))
        stored = dto.model_dump(mode="json")
        if isinstance(body, dict):
            stored.update(body)
        return PromiseResponse.model_validate(stored)

    async def create_all(
        self,
        school_id: str,
        audit_id: str,
        items: Sequence[PromiseItem],
    ) -> PromiseSubmissionResult:
        """
        Create every promise concurrently.

        Each call stands alone: some may succeed while others fail, and
        nothing already created is rolled back. The result says which.

        Returns:
            PromiseSubmissionResult with status none/complete/partial/failed
        """
        if not items:
            return PromiseSubmissionResult(status=PromiseCreationStatus.NONE)

        dtos = [CreatePromiseDto.from_item(school_id, audit_id, item) for item in items]
        outcomes = await asyncio.gather(
            *(self.create(dto) for dto in dtos), return_exceptions=True
        )

        created: List[PromiseResponse] = []
        failed: List[str] = []
        for dto, outcome in zip(dtos, outcomes):
            if isinstance(outcome, ExternalServiceError):
                failed.append(dto.plasticItemLabel)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                created.append(outcome)

        if not failed:
            status = PromiseCreationStatus.COMPLETE
        elif created:
            status = PromiseCreationStatus.PARTIAL
            logger.warning(
                f"Audit {audit_id}: {len(failed)} of {len(dtos)} reduction promises were not created"
            )
        else:
            status = PromiseCreationStatus.FAILED
            logger.error(f"Audit {audit_id}: no reduction promises could be created")

        return PromiseSubmissionResult(status=status, created=created, failed=failed)
