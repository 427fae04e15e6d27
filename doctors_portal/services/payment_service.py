import httpx

from doctors_portal.config import get_settings
from doctors_portal.utils.logger import get_logger

logger = get_logger("payment")


class PaymentBridgeError(RuntimeError):
    pass


def to_minor_units(price: float) -> int:
    """Dollars -> cents."""
    return int(round(price * 100))


async def create_payment_intent(
    *, price: float, transport: httpx.AsyncBaseTransport | None = None
) -> str:
    """
    Create a Stripe PaymentIntent for `price` and return its client secret.
    - Amount is sent in minor units, card only.
    - Stripe stays the source of truth for the intent; nothing is stored here.
    """
    settings = get_settings()
    if not settings.STRIPE_SECRET_KEY:
        raise PaymentBridgeError("Stripe configuration is missing (STRIPE_SECRET_KEY)")

    url = f"{settings.STRIPE_API_BASE.rstrip('/')}/v1/payment_intents"
    payload = {
        "amount": str(to_minor_units(price)),
        "currency": settings.PAYMENT_CURRENCY,
        "payment_method_types[]": "card",
    }

    async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
        resp = await client.post(url, data=payload, auth=(settings.STRIPE_SECRET_KEY, ""))
        if resp.status_code >= 400:
            raise PaymentBridgeError(f"Stripe error {resp.status_code}: {resp.text}")

    client_secret = resp.json().get("client_secret")
    if not client_secret:
        raise PaymentBridgeError("Stripe response has no client_secret")
    logger.info(f"Payment intent created for amount={payload['amount']} {payload['currency']}")
    return client_secret
