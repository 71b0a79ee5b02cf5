# =============================================================================
# app/routers/credits.py - Credit Ledger Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import AdminIdentity, require_admin
from core.models.credit import CreditType
from core.models.responses import CreditTransactionListResponse
from core.services.credit_service import CreditService

router = APIRouter()


@router.get("", response_model=CreditTransactionListResponse)
async def list_credit_transactions(
    credit_type: Annotated[
        CreditType, Query(alias="type", description="circuits, pt or partner-pt")
    ] = CreditType.CIRCUITS,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Credit transactions of one type, newest first.

    Spending a credit on a booking shows as a negative amount.
    """
    return {"transactions": CreditService.list_transactions(credit_type)}
