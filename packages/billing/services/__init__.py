"""Billing services."""

from packages.billing.services.validity_service import ValidityService
from packages.billing.services.reconciliation_service import ReconciliationService
from packages.billing.services.usage_service import UsageService

__all__ = [
    "ValidityService",
    "ReconciliationService",
    "UsageService",
]
