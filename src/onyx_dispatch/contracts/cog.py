"""Commands for splitting contract payouts."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from discord.ext import commands

from onyx_dispatch.contracts.config import ContractsConfig
from onyx_dispatch.contracts.shares import (
    Participant,
    allocate_shares,
    check_manual_shares,
    format_uec,
    payout_for,
)

_logger = logging.getLogger(__name__)


def parse_split_arguments(arguments: Sequence[str]) -> list[Participant]:
    """Parse participants given as 'name' or 'name:percent'.

    A participant with a percentage has a manual share, all others share
    the rest equally.
    """
    participants = []
    for argument in arguments:
        name, separator, share = argument.rpartition(":")
        if not separator:
            participants.append(Participant(id=argument, name=argument))
            continue

        try:
            share_percentage = float(share.rstrip("%"))
        except ValueError:
            raise ValueError(f"Invalid share {share!r} for {name!r}") from None
        participants.append(
            Participant(id=name, name=name, share_percentage=share_percentage, manual_override=True)
        )

    names = [p.id for p in participants]
    if len(set(names)) != len(names):
        raise ValueError("Every participant can only be listed once")
    return participants


class ContractsCog(commands.Cog):
    """A cog with commands for contract managers."""

    def __init__(self, bot: commands.Bot, config: ContractsConfig) -> None:
        self._bot = bot
        self.config = config
        _logger.info("Cog 'Contracts' has been initialized")

    @commands.command(name="split")
    async def split(self, ctx: commands.Context, payout: float, *arguments: str) -> None:
        """Split a payout, e.g. '$split 1000000 Alice:50 Bob Carol'."""
        if not arguments:
            await ctx.send(content=f"{ctx.author.mention} Please list at least one participant.")
            return
        if len(arguments) > self.config.max_split_participants:
            await ctx.send(
                content=f"{ctx.author.mention} At most "
                f"{self.config.max_split_participants} participants are supported."
            )
            return

        try:
            participants = parse_split_arguments(arguments)
            check_manual_shares(participants)
        except ValueError as e:
            _logger.info("Invalid split requested by %s: %s", ctx.author.display_name, e)
            await ctx.send(content=f"{ctx.author.mention} :x: {e}")
            return

        lines = [f"{ctx.author.mention} Split of {format_uec(payout)}:"]
        for participant in allocate_shares(participants):
            marker = " (manual)" if participant.manual_override else ""
            amount = payout_for(participant.share_percentage, payout)
            lines.append(
                f"* {participant.name}: {participant.share_percentage:.1f}%{marker}"
                f" = {format_uec(amount)}"
            )
        await ctx.send(content="\n".join(lines))

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:
        """Handle a command error raised in this class."""
        _logger.error(
            "An error occurred while running command %r:", ctx.command.name, exc_info=error
        )
