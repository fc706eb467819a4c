from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from onyx_dispatch.contracts import roster
from onyx_dispatch.contracts.shares import Participant
from onyx_dispatch.notifications.models import (
    ContractParticipantPayload,
    ContractPayload,
    ContractStatusPayload,
    NotificationPayload,
)
from onyx_dispatch.notifications.webhook import WebhookNotifier

_logger = logging.getLogger(__name__)


class Contract(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: str
    status: str = "open"
    created_by: str
    target_payout: float = 0
    location: str | None = None
    description: str | None = None
    participants: tuple[Participant, ...] = ()


class ContractService:
    def __init__(self, *, site_url: str, notifier: WebhookNotifier | None = None) -> None:
        """Apply contract changes and announce them on Discord.

        Announcements are best-effort: a failed notification never
        changes the returned contract.
        """
        self.site_url = site_url
        self.notifier = notifier

    async def post(self, contract: Contract) -> Contract:
        """Post a new contract with its creator as the only participant."""
        if not contract.participants:
            creator = Participant(id=contract.created_by, name=contract.created_by)
            update = roster.add_participant([], creator)
            contract = contract.model_copy(update={"participants": tuple(update.participants)})

        await self._notify(
            ContractPayload(
                contract_title=contract.title,
                contract_type=contract.type,
                created_by=contract.created_by,
                location=contract.location,
                target_payout=contract.target_payout,
                description=contract.description,
                site_url=self.site_url,
            )
        )
        return contract

    async def add_participant(
        self,
        contract: Contract,
        participant: Participant,
        *,
        role: str = "crew",
        added_by: str | None = None,
    ) -> tuple[Contract, roster.RosterUpdate]:
        """Add a participant and re-split the shares.

        A participant without ``added_by`` joined the contract on their own.
        """
        update = roster.add_participant(contract.participants, participant)
        contract = contract.model_copy(update={"participants": tuple(update.participants)})

        await self._notify(
            ContractParticipantPayload(
                contract_title=contract.title,
                participant_name=participant.name or participant.id,
                participant_role=role,
                action="added" if added_by else "joined",
                added_by=added_by,
                site_url=self.site_url,
            )
        )
        return contract, update

    def remove_participant(
        self, contract: Contract, participant_id: str
    ) -> tuple[Contract, roster.RosterUpdate]:
        update = roster.remove_participant(contract.participants, participant_id)
        return contract.model_copy(update={"participants": tuple(update.participants)}), update

    def pin_share(
        self, contract: Contract, participant_id: str, share_percentage: float
    ) -> tuple[Contract, roster.RosterUpdate]:
        update = roster.pin_share(contract.participants, participant_id, share_percentage)
        return contract.model_copy(update={"participants": tuple(update.participants)}), update

    def reset_to_auto(
        self, contract: Contract, participant_id: str
    ) -> tuple[Contract, roster.RosterUpdate]:
        update = roster.reset_to_auto(contract.participants, participant_id)
        return contract.model_copy(update={"participants": tuple(update.participants)}), update

    async def change_status(
        self, contract: Contract, new_status: str, *, changed_by: str
    ) -> Contract:
        if new_status == contract.status:
            return contract

        _logger.info("Contract %r: %s -> %s", contract.id, contract.status, new_status)
        updated = contract.model_copy(update={"status": new_status})
        await self._notify(
            ContractStatusPayload(
                contract_title=contract.title,
                old_status=contract.status,
                new_status=new_status,
                changed_by=changed_by,
                site_url=self.site_url,
            )
        )
        return updated

    async def _notify(self, payload: NotificationPayload) -> None:
        if self.notifier is None:
            _logger.debug("No webhook configured, skipping %s", type(payload).__name__)
            return
        await self.notifier.notify(payload)
