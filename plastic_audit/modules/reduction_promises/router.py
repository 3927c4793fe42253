"""
Reduction Promises Router - stored promises of an audit and their impact
"""

from typing import List

from fastapi import APIRouter, Depends

from plastic_audit.core.api_client import BackendClient, get_backend_client
from plastic_audit.core.response_interceptor import CustomAPIRoute
from .impact import calculate_aggregate_metrics
from .schemas import AggregatedImpact, PromiseResponse
from .service import ReductionPromisesService

router = APIRouter(
    prefix="/reduction-promises", tags=["reduction-promises"], route_class=CustomAPIRoute
)


def get_promises_service(
    client: BackendClient = Depends(get_backend_client),
) -> ReductionPromisesService:
    return ReductionPromisesService(client)


@router.get("/audit/{audit_id}", response_model=List[PromiseResponse])
async def get_promises_for_audit(
    audit_id: str, service: ReductionPromisesService = Depends(get_promises_service)
):
    """Get every reduction promise stored for an audit"""
    return await service.list_for_audit(audit_id)


@router.get("/audit/{audit_id}/impact", response_model=AggregatedImpact)
async def get_promise_impact(
    audit_id: str, service: ReductionPromisesService = Depends(get_promises_service)
):
    """
    Annual environmental impact of an audit's promises.

    Weekly and monthly reductions are scaled up to a year before being
    converted to grams and the fun/serious equivalents.
    """
    promises = await service.list_for_audit(audit_id)
    return calculate_aggregate_metrics(promises)
