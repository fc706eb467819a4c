from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

_logger = logging.getLogger(__name__)

FULL_SHARE = 100.0
_CENT = Decimal("0.01")


class InvalidShareError(ValueError):
    """Manual shares cannot be honoured without producing negative auto shares."""


class Participant(BaseModel):
    """Contract member entitled to a percentage of the payout."""

    model_config = ConfigDict(frozen=True)

    id: str
    share_percentage: float = 0.0
    manual_override: bool = False
    name: str | None = None


def allocate_shares(participants: Sequence[Participant]) -> list[Participant]:
    """Split the share not pinned by manual overrides equally among all other participants.

    The result keeps the membership and order of the input. Overridden
    participants are returned as they are. If every participant is
    overridden, the input is returned unchanged.
    """
    free = [p for p in participants if not p.manual_override]
    if not free:
        return list(participants)

    manual_total = sum(p.share_percentage for p in participants if p.manual_override)
    equal_share = (FULL_SHARE - manual_total) / len(free)
    if equal_share < 0:
        _logger.warning(
            "Manual shares sum to %.2f%%, auto shares become negative (%.2f%%)",
            manual_total,
            equal_share,
        )

    return [
        p if p.manual_override else p.model_copy(update={"share_percentage": equal_share})
        for p in participants
    ]


def check_manual_shares(participants: Iterable[Participant]) -> None:
    """Raise InvalidShareError if the pinned shares cannot add up to a valid split."""
    manual_total = 0.0
    for participant in participants:
        if not participant.manual_override:
            continue
        if not 0 <= participant.share_percentage <= FULL_SHARE:
            raise InvalidShareError(
                f"Share of participant {participant.id!r} is out of range: "
                f"{participant.share_percentage}%"
            )
        manual_total += participant.share_percentage

    if manual_total > FULL_SHARE:
        raise InvalidShareError(f"Manual shares sum to {manual_total}%, more than 100%")


def changed_shares(
    before: Iterable[Participant], after: Iterable[Participant]
) -> list[Participant]:
    """Get the participants whose share has to be written back."""
    previous_shares = {p.id: p.share_percentage for p in before}
    return [p for p in after if previous_shares.get(p.id) != p.share_percentage]


def payout_for(share_percentage: float, target_payout: float | Decimal) -> Decimal:
    """Get the UEC amount of a share, rounded half-up to cents."""
    amount = Decimal(str(target_payout)) * Decimal(str(share_percentage)) / 100
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def format_uec(amount: float | Decimal) -> str:
    # like 1,234,567.5 UEC
    formatted = f"{Decimal(str(amount)):,.2f}".rstrip("0").rstrip(".")
    return f"{formatted} UEC"
