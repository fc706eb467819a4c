from __future__ import annotations

import pydantic


class DiscordUser(pydantic.BaseModel):
    """Discord account of a guild member."""

    # https://discord.com/developers/docs/resources/user#user-object
    id: str
    username: str
    avatar: str | None = None


class GuildMember(pydantic.BaseModel):
    """Member of a guild with the ids of the roles they hold."""

    # https://discord.com/developers/docs/resources/guild#guild-member-object
    user: DiscordUser
    roles: list[str]
    nick: str | None = None

    @property
    def display_name(self) -> str:
        return self.nick or self.user.username
