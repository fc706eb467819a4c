from __future__ import annotations

import logging
import os

import discord
from discord import Client
from discord.ext import commands, tasks
from discord.utils import get as discord_get

from onyx_dispatch.roles.config import RoleSyncConfig
from onyx_dispatch.roles.discord_api_response_models import DiscordUser, GuildMember
from onyx_dispatch.roles.discord_connector import GuildConnector
from onyx_dispatch.roles.member_store import MemberStore
from onyx_dispatch.roles.role_sync import RoleSync

_logger = logging.getLogger(__name__)


def guild_member_from_discord(member: discord.Member) -> GuildMember:
    """Convert a discord.py member into the model used by the role sync."""
    return GuildMember(
        user=DiscordUser(id=str(member.id), username=member.name),
        roles=[str(role.id) for role in member.roles if not role.is_default()],
        nick=member.nick,
    )


class RoleSyncCog(commands.Cog):
    def __init__(self, bot: Client, config: RoleSyncConfig) -> None:
        self.bot = bot
        self.config = config

        self.role_sync = RoleSync(
            connector=GuildConnector(
                guild_id=self.config.guild_id,
                token=os.environ["DISCORD_BOT_TOKEN"],
            ),
            store=MemberStore(self.config.member_store_file),
            config=self.config,
        )
        _logger.info("Cog 'Role Sync' has been initialized")

    async def cog_load(self) -> None:
        _logger.info("Scheduling periodic role sync task.")
        self.sync_roles.change_interval(minutes=self.config.sync_interval_minutes)
        self.sync_roles.start()

    async def cog_unload(self) -> None:
        _logger.info("Canceling periodic role sync task.")
        self.sync_roles.cancel()

    @tasks.loop(minutes=30)
    async def sync_roles(self) -> None:
        _logger.info("Starting the periodic role sync...")
        try:
            await self.role_sync.sync_all_members()
            _logger.info("Finished the periodic role sync.")
        except Exception:
            _logger.exception("Periodic role sync failed")

    @sync_roles.before_loop
    async def before_sync_roles(self) -> None:
        await self.bot.wait_until_ready()

    @commands.Cog.listener()
    async def on_member_update(self, before: discord.Member, after: discord.Member) -> None:
        if str(after.guild.id) != self.config.guild_id or before.roles == after.roles:
            return

        resolved, _ = await self.role_sync.apply(guild_member_from_discord(after))
        _logger.info("Roles of %s changed, now resolved as %s", after.display_name, resolved)

    @commands.command(name="sync")
    async def sync_command(self, ctx: commands.Context) -> None:
        """Synchronise the system roles of all guild members."""
        await ctx.send(content=f"{ctx.author.mention} Synchronising member roles...")
        report = await self.role_sync.sync_all_members()

        lines = [
            f"{ctx.author.mention} Role sync finished:",
            f"* {report.synced} of {report.total} members synced",
            f"* {report.created} created, {report.updated} updated",
        ]
        lines += [f"* :x: {error}" for error in report.errors[:10]]
        await ctx.send(content="\n".join(lines))

    async def cog_check(self, ctx: commands.Context) -> bool:
        if ctx.guild is None:
            return False
        required_role = discord_get(ctx.guild.roles, name=self.config.sync_command_role)
        if required_role is None or ctx.author.get_role(required_role.id) is None:
            _logger.info(
                "%s (%r) tried to run %r but does not have the role %s",
                ctx.author.display_name,
                ctx.author.id,
                ctx.command.name,
                self.config.sync_command_role,
            )
            return False
        return True

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:
        _logger.error(
            "An error occurred while running command %r:", ctx.command.name, exc_info=error
        )
