"""Poll a pending mobile-money charge until it settles."""

import time
from typing import Any, Callable

from luna_ops.exceptions import PaymentNotConfirmed
from luna_ops.payments.protocol import PaymentGateway
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.payments.polling")

WAITING_STATUSES = frozenset({"pending", "send_otp"})
SUCCESS_STATUS = "success"


def charge_status(response: dict[str, Any]) -> str:
    data = response.get("data") or {}
    return str(data.get("status") or "unknown")


def await_charge_success(
    gateway: PaymentGateway,
    reference: str,
    initial_status: str = "pending",
    interval_seconds: float = 6.0,
    max_attempts: int = 10,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Any]:
    """Wait for ``reference`` to reach ``success``; return the last gateway response.

    Sleeps ``interval_seconds`` before each of at most ``max_attempts`` polls.
    ``pending`` and ``send_otp`` keep waiting. Any other status, or running out
    of polls, raises PaymentNotConfirmed.
    """
    status = initial_status
    if status == SUCCESS_STATUS:
        return {"status": True, "data": {"status": status, "reference": reference}}
    if status not in WAITING_STATUSES:
        raise PaymentNotConfirmed(reference, status)

    last: dict[str, Any] = {}
    for attempt in range(1, max_attempts + 1):
        sleep(interval_seconds)
        last = gateway.check_charge(reference)
        status = charge_status(last)
        logger.info("payment.poll.status", reference=reference, attempt=attempt, status=status)
        if status == SUCCESS_STATUS:
            return last
        if status not in WAITING_STATUSES:
            raise PaymentNotConfirmed(reference, status)

    logger.warning("payment.poll.exhausted", reference=reference, attempts=max_attempts, status=status)
    raise PaymentNotConfirmed(
        reference,
        status,
        f"Payment not completed. Final status: {status} after {max_attempts} checks",
    )
