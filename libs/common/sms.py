"""Outbound SMS notifications.

When ``SMS_GATEWAY_URL`` is unset the message is only logged, which is the
expected setup for local development and tests.
"""

import httpx

from libs.common.config import get_settings
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)

_DEFAULT_TIMEOUT = 10.0


async def send_sms(mobile: str, message: str) -> bool:
    """Send a text message. Returns False instead of raising on failure."""
    settings = get_settings()
    if not settings.SMS_GATEWAY_URL:
        logger.info("SMS (not sent, no gateway configured) to %s: %s", mobile, message)
        return True

    headers = {}
    if settings.SMS_GATEWAY_TOKEN:
        headers["Authorization"] = f"Bearer {settings.SMS_GATEWAY_TOKEN}"
    request_id = get_request_id()
    if request_id:
        headers["X-Request-ID"] = request_id

    try:
        async with httpx.AsyncClient(timeout=_DEFAULT_TIMEOUT) as client:
            response = await client.post(
                settings.SMS_GATEWAY_URL,
                json={"to": mobile, "message": message},
                headers=headers,
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Failed to send SMS to %s: %s", mobile, e)
        return False

    logger.info("Sent SMS to %s", mobile)
    return True


async def send_confirmation_sms(mobile: str, full_name: str) -> bool:
    """Welcome text sent after a successful registration."""
    return await send_sms(
        mobile,
        f"Welcome to HarvestHub, {full_name}! Your registration is successful.",
    )
