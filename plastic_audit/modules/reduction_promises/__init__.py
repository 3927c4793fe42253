"""Reduction promises module"""

from .impact import calculate_aggregate_metrics
from .schemas import PromiseItem, PromiseOption, PromiseResponse, PromiseSubmissionResult
from .service import ReductionPromisesService, extract_promise_options
from .router import router

__all__ = [
    "calculate_aggregate_metrics",
    "PromiseItem",
    "PromiseOption",
    "PromiseResponse",
    "PromiseSubmissionResult",
    "ReductionPromisesService",
    "extract_promise_options",
    "router",
]
