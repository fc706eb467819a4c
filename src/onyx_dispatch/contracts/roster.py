"""Changes to the participants of a contract.

Every change that affects the equal split (joining, leaving, or going
back to an automatic share) re-allocates the shares. Pinning a share
does not re-allocate: the remaining participants keep their share until
the next re-allocation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import attrs

from onyx_dispatch.contracts.shares import (
    FULL_SHARE,
    InvalidShareError,
    Participant,
    allocate_shares,
    changed_shares,
)

_logger = logging.getLogger(__name__)


@attrs.define(frozen=True)
class RosterUpdate:
    """Participants after a change, and those whose share must be written back."""

    participants: list[Participant]
    changed: list[Participant] = attrs.field(factory=list)


def add_participant(
    participants: Sequence[Participant], participant: Participant
) -> RosterUpdate:
    if any(p.id == participant.id for p in participants):
        raise ValueError(f"Participant {participant.id!r} is already part of the contract")

    _logger.info("Adding participant %r", participant.id)
    return _reallocate([*participants, participant], previous=participants)


def remove_participant(participants: Sequence[Participant], participant_id: str) -> RosterUpdate:
    _index_of(participants, participant_id)

    _logger.info("Removing participant %r", participant_id)
    remaining = [p for p in participants if p.id != participant_id]
    return _reallocate(remaining, previous=participants)


def pin_share(
    participants: Sequence[Participant], participant_id: str, share_percentage: float
) -> RosterUpdate:
    """Set a manual share for a participant, excluding it from the equal split."""
    if not 0 <= share_percentage <= FULL_SHARE:
        raise InvalidShareError(f"Share must be between 0% and 100%, got {share_percentage}%")

    index = _index_of(participants, participant_id)
    pinned = participants[index].model_copy(
        update={"share_percentage": share_percentage, "manual_override": True}
    )
    _logger.info("Pinning share of participant %r at %.2f%%", participant_id, share_percentage)

    updated = list(participants)
    updated[index] = pinned
    return RosterUpdate(participants=updated, changed=[pinned])


def reset_to_auto(participants: Sequence[Participant], participant_id: str) -> RosterUpdate:
    """Clear the manual share of a participant and re-allocate."""
    index = _index_of(participants, participant_id)
    updated = list(participants)
    updated[index] = participants[index].model_copy(update={"manual_override": False})

    _logger.info("Resetting share of participant %r to auto", participant_id)
    return _reallocate(updated, previous=participants)


def _reallocate(
    participants: Sequence[Participant], *, previous: Sequence[Participant]
) -> RosterUpdate:
    allocated = allocate_shares(participants)
    previous_by_id = {p.id: p for p in previous}
    changed = changed_shares(previous, allocated)
    # a cleared override has to be written back even if the share stays the same
    changed += [
        p
        for p in allocated
        if p not in changed
        and p.id in previous_by_id
        and previous_by_id[p.id].manual_override != p.manual_override
    ]
    return RosterUpdate(participants=allocated, changed=changed)


def _index_of(participants: Sequence[Participant], participant_id: str) -> int:
    for index, participant in enumerate(participants):
        if participant.id == participant_id:
            return index
    raise KeyError(f"No participant {participant_id!r} in this contract")
