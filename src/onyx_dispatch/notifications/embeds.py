from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from functools import singledispatch
from typing import Final

from discord import Embed

from onyx_dispatch.contracts.shares import format_uec
from onyx_dispatch.notifications.models import (
    ContractParticipantPayload,
    ContractPayload,
    ContractStatusPayload,
    ServiceRequestPayload,
)

_FIELD_VALUE_WIDTH: Final = 1024
_DISPATCH_FOOTER: Final = "Onyx Services Dispatch"
_CONTRACTS_FOOTER: Final = "Onyx Services Contract Manager"


class EmbedColors(Enum):
    CYAN = 0x06B6D4
    BLUE = 0x3B82F6
    GREEN = 0x10B981
    RED = 0xEF4444


@singledispatch
def create_embed(payload: object) -> Embed:
    """Create a Discord embed for a notification payload."""
    raise TypeError(f"Unsupported notification payload: {type(payload).__name__}")


@create_embed.register
def _(payload: ServiceRequestPayload) -> Embed:
    embed = _new_embed(
        title="\N{POLICE CARS REVOLVING LIGHT} New Service Request",
        color=EmbedColors.CYAN,
        description=(
            f"[View in Dashboard]({payload.site_url}/dashboard)\n"
            f"**Tracking Code:** {payload.tracking_code}"
        ),
    )
    embed.add_field(
        name="Client", value=f"{payload.client_name} ({payload.client_discord})", inline=False
    )
    embed.add_field(name="Service Type", value=payload.service_type, inline=True)
    embed.add_field(name="System", value=f"{payload.system} ({payload.system_code})", inline=True)
    embed.add_field(name="Location", value=payload.location_details, inline=False)
    if payload.description:
        embed.add_field(
            name="Additional Details", value=_truncate(payload.description), inline=False
        )

    embed.set_footer(text=_DISPATCH_FOOTER)
    return embed


@create_embed.register
def _(payload: ContractPayload) -> Embed:
    embed = _new_embed(
        title="\N{SCROLL} New Contract Posted",
        color=EmbedColors.BLUE,
        description=f"[View Contracts]({payload.site_url}/contracts)",
    )
    embed.add_field(name="Contract Title", value=payload.contract_title, inline=False)
    embed.add_field(name="Type", value=_format_contract_type(payload.contract_type), inline=True)
    embed.add_field(name="Target Payout", value=format_uec(payload.target_payout), inline=True)
    embed.add_field(name="Posted By", value=payload.created_by, inline=False)
    if payload.location:
        embed.add_field(name="Location", value=payload.location, inline=False)
    if payload.description:
        embed.add_field(name="Description", value=_truncate(payload.description), inline=False)

    embed.set_footer(text=_CONTRACTS_FOOTER)
    return embed


@create_embed.register
def _(payload: ContractParticipantPayload) -> Embed:
    action = "joined" if payload.action == "joined" else "was added to"
    added_by = f" by {payload.added_by}" if payload.added_by else ""

    embed = _new_embed(
        title="\N{BUST IN SILHOUETTE} Contract Participant Update",
        color=EmbedColors.GREEN,
        description=f"[View Contracts]({payload.site_url}/contracts)",
    )
    embed.add_field(name="Contract", value=payload.contract_title, inline=False)
    embed.add_field(
        name="Update",
        value=(
            f"**{payload.participant_name}** {action} the contract "
            f"as **{payload.participant_role}**{added_by}"
        ),
        inline=False,
    )

    embed.set_footer(text=_CONTRACTS_FOOTER)
    return embed


@create_embed.register
def _(payload: ContractStatusPayload) -> Embed:
    emoji, color = _status_style(payload.new_status)

    embed = _new_embed(
        title=f"{emoji} Contract Status Changed",
        color=color,
        description=f"[View Contracts]({payload.site_url}/contracts)",
    )
    embed.add_field(name="Contract", value=payload.contract_title, inline=False)
    embed.add_field(
        name="Status Change",
        value=(
            f"**{payload.old_status.upper()}** \N{RIGHTWARDS ARROW} "
            f"**{payload.new_status.upper()}**"
        ),
        inline=True,
    )
    embed.add_field(name="Changed By", value=payload.changed_by, inline=True)

    embed.set_footer(text=_CONTRACTS_FOOTER)
    return embed


def _new_embed(*, title: str, color: EmbedColors, description: str) -> Embed:
    return Embed(
        title=title,
        color=color.value,
        description=description,
        timestamp=datetime.now(tz=UTC),
    )


def _status_style(status: str) -> tuple[str, EmbedColors]:
    if status == "active":
        return "\N{BLACK RIGHT-POINTING TRIANGLE}\N{VARIATION SELECTOR-16}", EmbedColors.CYAN
    if status == "completed":
        return "\N{WHITE HEAVY CHECK MARK}", EmbedColors.GREEN
    return "\N{CROSS MARK}", EmbedColors.RED


def _format_contract_type(contract_type: str) -> str:
    # only the first underscore is replaced, e.g. 'salvage_op' -> 'SALVAGE OP'
    return contract_type.replace("_", " ", 1).upper()


def _truncate(value: str) -> str:
    return value[:_FIELD_VALUE_WIDTH]
