from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ServiceRequestPayload(BaseModel):
    """A client submitted a new service request."""

    client_name: str
    client_discord: str
    service_type: str
    system: str
    system_code: str
    location_details: str
    description: str | None = None
    tracking_code: str
    site_url: str


class ContractPayload(BaseModel):
    """A new contract was posted."""

    contract_title: str
    contract_type: str
    created_by: str
    location: str | None = None
    target_payout: float
    description: str | None = None
    site_url: str


class ContractParticipantPayload(BaseModel):
    """A participant joined or was added to a contract."""

    contract_title: str
    participant_name: str
    participant_role: str
    action: Literal["joined", "added"]
    added_by: str | None = None
    site_url: str


class ContractStatusPayload(BaseModel):
    """The status of a contract changed."""

    contract_title: str
    old_status: str
    new_status: str
    changed_by: str
    site_url: str


NotificationPayload = (
    ServiceRequestPayload | ContractPayload | ContractParticipantPayload | ContractStatusPayload
)
