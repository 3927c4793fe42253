"""Audits module"""

from .models import AuditStatus, WizardStep, LoadState
from .metrics import calculate_results
from .wizard import WizardController, WizardRegistry
from .router import router

__all__ = [
    "AuditStatus",
    "WizardStep",
    "LoadState",
    "calculate_results",
    "WizardController",
    "WizardRegistry",
    "router",
]
