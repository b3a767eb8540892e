"""
Billing API routes.

Entitlement checks and administrative operations for trusted services.
The X-API-Key check is applied where the router is mounted.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from packages.billing.dependencies import (
    get_reconciliation_service,
    get_usage_service,
    get_validity_service,
)
from packages.billing.models.schemas.billing import (
    CancelSubscriptionRequest,
    CancelSubscriptionResponse,
    RejectedPurchase,
    RejectedPurchasesRequest,
    RejectedPurchasesResponse,
    SpendingUnitsRequest,
    SpendingUnitsResponse,
    VerifySubscriptionRequest,
    VerifySubscriptionResponse,
)
from packages.billing.services import (
    ReconciliationService,
    UsageService,
    ValidityService,
)

router = APIRouter()


# ============================================================================
# Entitlement
# ============================================================================


@router.post(
    "/verify-subscription-validity", response_model=VerifySubscriptionResponse
)
async def verify_subscription_validity(
    body: VerifySubscriptionRequest,
    validity: Annotated[ValidityService, Depends(get_validity_service)],
):
    """
    Check whether an account may use the metered service.

    Free allowance wins over any subscription state; otherwise the
    recognized subscription must be active, not cancelled, and within its
    period budget.
    """
    verdict = await validity.verify(body.account_id)
    return VerifySubscriptionResponse.from_verdict(verdict)


# ============================================================================
# Administration
# ============================================================================


@router.post("/cancel-subscription", response_model=CancelSubscriptionResponse)
async def cancel_subscription(
    body: CancelSubscriptionRequest,
    validity: Annotated[ValidityService, Depends(get_validity_service)],
):
    """Cancel a subscription at the billing provider."""
    await validity.cancel_subscription(body.subscription_id)
    return CancelSubscriptionResponse(subscription_id=body.subscription_id)


@router.post("/spending-units", response_model=SpendingUnitsResponse)
async def add_spending_units(
    body: SpendingUnitsRequest,
    usage: Annotated[UsageService, Depends(get_usage_service)],
):
    """Append consumed units; external ids already recorded are skipped."""
    inserted = await usage.add_spending_units(
        [item.to_domain() for item in body.items]
    )
    return SpendingUnitsResponse(inserted=inserted)


@router.post("/rejected-purchases", response_model=RejectedPurchasesResponse)
async def list_rejected_purchases(
    body: RejectedPurchasesRequest,
    reconciliation: Annotated[
        ReconciliationService, Depends(get_reconciliation_service)
    ],
):
    """Purchases refused because the account already had a live subscription."""
    entries = await reconciliation.rejected_purchases(body.account_id)
    return RejectedPurchasesResponse(
        entries=[RejectedPurchase.from_entry(entry) for entry in entries]
    )
