"""Errors of the contract and service request announcements."""

import attrs


class NotificationError(Exception):
    """An announcement could not be sent to Discord."""


@attrs.define
class WebhookDeliveryError(NotificationError):
    """Discord answered the webhook request with an error status.

    Only the status and message of the response are kept, the webhook
    URL embeds its token.
    """

    status: int
    message: str

    def __str__(self) -> str:
        return f"Discord rejected the announcement with HTTP {self.status}: {self.message!r}"
