from __future__ import annotations

import asyncio
import logging

import aiohttp
from discord import Embed

from onyx_dispatch.notifications.embeds import create_embed
from onyx_dispatch.notifications.exceptions import WebhookDeliveryError
from onyx_dispatch.notifications.models import NotificationPayload

_logger = logging.getLogger(__name__)


class WebhookNotifier:
    def __init__(self, *, session: aiohttp.ClientSession, webhook_url: str) -> None:
        """Post notification embeds to a Discord webhook."""
        self._session = session
        self._webhook_url = webhook_url

    async def execute_webhook(self, embed: Embed) -> None:
        """Post a single embed to the webhook.

        :raises WebhookDeliveryError: If Discord rejects the message
        """
        message_data = {"embeds": [embed.to_dict()], "allowed_mentions": {"parse": []}}
        try:
            await self._session.post(
                url=self._webhook_url, json=message_data, raise_for_status=True
            )
        except aiohttp.ClientResponseError as exc:
            # the request URL contains the webhook token and must not be logged
            raise WebhookDeliveryError(status=exc.status, message=exc.message) from None
        _logger.info("Delivered webhook message %r", embed.title)

    async def notify(self, payload: NotificationPayload) -> bool:
        """Send a notification without raising on failure. Return whether it was delivered."""
        try:
            await self.execute_webhook(create_embed(payload))
        except WebhookDeliveryError:
            _logger.exception("Failed to send %s notification", type(payload).__name__)
            return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            # connection errors may carry the webhook URL, only log the error type
            _logger.error(
                "Failed to send %s notification (%s)", type(payload).__name__, type(exc).__name__
            )
            return False
        return True
