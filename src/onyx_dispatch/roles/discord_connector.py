from __future__ import annotations

import logging
import time
from http import HTTPStatus

import aiohttp

from onyx_dispatch.roles.discord_api_response_models import GuildMember

_logger = logging.getLogger(__name__)

DISCORD_API_URL = "https://discord.com/api/v10"

# maximum page size of the 'List Guild Members' endpoint
MEMBERS_PAGE_LIMIT = 1000


class NotAGuildMemberError(Exception):
    """The user is not a member of the guild."""

    def __init__(self, discord_id: str) -> None:
        super().__init__(f"User {discord_id} is not a member of the required Discord server")
        self.discord_id = discord_id


class GuildConnector:
    def __init__(self, *, guild_id: str, token: str, api_url: str = DISCORD_API_URL) -> None:
        """Read guild members and their roles from the Discord REST API."""
        self._guild_url = f"{api_url.rstrip('/')}/guilds/{guild_id}"

        # https://discord.com/developers/docs/reference#authentication
        self._http_headers = {"Authorization": f"Bot {token}"}

    async def fetch_member(self, discord_id: str) -> GuildMember:
        """Fetch a guild member. Raise NotAGuildMemberError if the user is not in the guild."""
        async with (
            aiohttp.ClientSession(headers=self._http_headers) as session,
            session.get(f"{self._guild_url}/members/{discord_id}") as response,
        ):
            if response.status == HTTPStatus.NOT_FOUND:
                raise NotAGuildMemberError(discord_id)
            response.raise_for_status()
            member_as_json = await response.json()

        return GuildMember(**member_as_json)

    async def is_guild_member(self, discord_id: str) -> bool:
        try:
            await self.fetch_member(discord_id)
        except NotAGuildMemberError:
            return False
        return True

    async def fetch_all_members(self) -> list[GuildMember]:
        """Fetch all guild members, following the 'after' cursor of the paginated endpoint."""
        # https://discord.com/developers/docs/resources/guild#list-guild-members
        members: list[GuildMember] = []

        start = time.perf_counter()
        async with aiohttp.ClientSession(headers=self._http_headers) as session:
            after: str | None = None
            while True:
                params = {"limit": str(MEMBERS_PAGE_LIMIT)}
                if after is not None:
                    params["after"] = after

                _logger.debug("Fetching guild members (params: %r)", params)
                async with session.get(f"{self._guild_url}/members", params=params) as response:
                    if response.status == HTTPStatus.FORBIDDEN:
                        _logger.error(
                            "Discord returned 403 Forbidden. Make sure the bot is in the guild "
                            "and the 'Server Members Intent' is enabled."
                        )
                    response.raise_for_status()
                    page = [GuildMember(**member) for member in await response.json()]

                members += page
                _logger.debug("Found %d members", len(page))

                if len(page) < MEMBERS_PAGE_LIMIT:
                    break
                after = page[-1].user.id

        _logger.info(
            "Fetched %d guild members in %.3f seconds", len(members), time.perf_counter() - start
        )
        return members
