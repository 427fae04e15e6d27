from fastapi import APIRouter, Depends, HTTPException

from doctors_portal.schemas import PaymentIntentIn, PaymentIntentOut, Principal
from doctors_portal.security import get_current_principal
from doctors_portal.services.payment_service import PaymentBridgeError, create_payment_intent
from doctors_portal.utils.logger import get_logger

logger = get_logger("payment")

router = APIRouter(tags=["payment"])


@router.post("/create-payment-intent", response_model=PaymentIntentOut)
async def route_create_payment_intent(
    payload: PaymentIntentIn, current: Principal = Depends(get_current_principal)
):
    try:
        client_secret = await create_payment_intent(price=payload.price)
    except PaymentBridgeError as e:
        logger.error(f"Payment intent failed for {current.email}: {e}")
        raise HTTPException(status_code=502, detail="Payment processor unavailable")
    return PaymentIntentOut(clientSecret=client_secret)
