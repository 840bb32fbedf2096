"""Paystack webhook receiver."""

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from luna_ops.api.deps import get_services
from luna_ops.exceptions import ConfigurationError
from luna_ops.models.payments import PaystackEvent
from luna_ops.payments.signature import verify_signature
from luna_ops.services.container import Services
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.api.webhooks")

SIGNATURE_HEADER = "x-paystack-signature"

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/paystack")
async def paystack_webhook(request: Request, services: Services = Depends(get_services)) -> dict[str, bool]:
    """Verify the HMAC-SHA512 signature over the raw body, then record the event."""
    secret = services.paystack_secret_key
    if not secret:
        logger.error("webhook.paystack.no_secret")
        raise ConfigurationError("PAYSTACK_SECRET_KEY", "Webhook secret is not configured.")
    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        logger.warning("webhook.paystack.missing_signature")
        raise HTTPException(status_code=400, detail="Missing signature")
    body = await request.body()
    if not verify_signature(secret, body, signature):
        logger.warning("webhook.paystack.bad_signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        event = PaystackEvent.model_validate_json(body)
    except PydanticValidationError as e:
        logger.warning("webhook.paystack.parse_error", error=str(e))
        raise HTTPException(status_code=400, detail="Malformed event body") from e

    reference = str(event.data.get("reference") or "")
    logger.info("webhook.paystack.received", event_type=event.event, reference=reference)
    if event.event == "charge.success" and reference:
        order = await run_in_threadpool(services.orders.find_by_reference, reference)
        if order is None:
            logger.warning("webhook.paystack.no_matching_order", reference=reference)
        else:
            logger.info("webhook.paystack.order_matched", reference=reference, order_id=order.id)
    return {"received": True}
