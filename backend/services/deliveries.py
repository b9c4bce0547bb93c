"""
Optional ledger of processed webhook deliveries, kept in Redis.

GitHub delivers at least once and keeps the ``X-GitHub-Delivery`` id on
redelivery. When enabled, a delivery id is claimed before processing and
a repeated id is acknowledged without producing records.
"""

import os
from enum import Enum

import utils.logging
from utils.redis_client import RedisClient

logger = utils.logging.get_logger(__name__)

DEFAULT_DELIVERY_TTL = 86400


class DeliveryRedisNamespace(Enum):
    """Base namespace for delivery ledger keys."""

    WEBHOOK = "webhook"
    DELIVERY = "delivery"

    @staticmethod
    def key(delivery_id: str) -> str:
        return (
            f"{DeliveryRedisNamespace.WEBHOOK.value}:"
            f"{DeliveryRedisNamespace.DELIVERY.value}:{delivery_id}"
        )


def dedupe_enabled() -> bool:
    return os.getenv("WEBHOOK_DEDUPE_DELIVERIES", "false").lower() in ("1", "true", "yes")


def delivery_ttl() -> int:
    return int(os.getenv("WEBHOOK_DELIVERY_TTL", str(DEFAULT_DELIVERY_TTL)))


class DeliveryLedger:
    """
    Claims delivery ids with ``SET NX EX``.
    """

    @staticmethod
    async def claim(delivery_id: str) -> bool:
        """
        Mark ``delivery_id`` as being processed.
        :return: False if the id was already claimed.
        """
        claimed = await RedisClient.set_if_absent(
            DeliveryRedisNamespace.key(delivery_id), "1", ex=delivery_ttl()
        )
        if not claimed:
            logger.info(f"Delivery {delivery_id} already processed")
        return claimed

    @staticmethod
    async def release(delivery_id: str) -> None:
        """
        Forget a claim so a redelivery of a failed delivery is processed.
        """
        await RedisClient.delete(DeliveryRedisNamespace.key(delivery_id))
