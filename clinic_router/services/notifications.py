import logging
from typing import Any

from clinic_router.services.masking import mask_contact

logger = logging.getLogger(__name__)


class LogNotifier:
    """
    Outbound message channel stub. Nothing is delivered and nothing is kept:
    each message is logged with the recipient masked.
    """

    def send(self, to: Any, channel: Any, body: Any) -> bool:
        logger.info("📨 Queued %s message to %s", channel or "default", mask_contact(to))
        return True
