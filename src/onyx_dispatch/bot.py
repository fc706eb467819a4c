from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Literal

import discord
from discord.ext import commands
from pydantic import BaseModel

from onyx_dispatch.contracts.cog import ContractsCog
from onyx_dispatch.contracts.config import ContractsConfig
from onyx_dispatch.roles.cog import RoleSyncCog
from onyx_dispatch.roles.config import RoleSyncConfig

# silence warning about missing discord voice support
# https://github.com/Rapptz/discord.py/issues/1719#issuecomment-437703581
discord.VoiceClient.warn_nacl = False

_logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config(BaseModel):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    role_sync: RoleSyncConfig
    contracts: ContractsConfig = ContractsConfig()


def load_config(config_file: Path) -> Config:
    return Config(**tomllib.loads(config_file.read_text()))


async def run_bot(config: Config, auth_token: str) -> None:
    intents = discord.Intents.default()
    intents.members = True
    intents.message_content = True

    async with commands.Bot(intents=intents, command_prefix="$") as bot:
        await bot.add_cog(RoleSyncCog(bot, config.role_sync))
        await bot.add_cog(ContractsCog(bot, config.contracts))

        await bot.start(auth_token)


def _bot_token() -> str:
    token = os.environ.get("DISCORD_BOT_TOKEN")
    if not token:
        raise RuntimeError("Set the bot token in the DISCORD_BOT_TOKEN environment variable")
    return token


def main() -> None:
    parser = argparse.ArgumentParser(description="Onyx Services Dispatch Discord bot")
    parser.add_argument(
        "--config-file", type=Path, required=True, help="TOML file, see config.example.toml"
    )
    args = parser.parse_args()

    token = _bot_token()
    config = load_config(args.config_file)
    logging.basicConfig(level=config.log_level, stream=sys.stdout, format=_LOG_FORMAT)

    try:
        asyncio.run(run_bot(config, auth_token=token))
    except KeyboardInterrupt:
        _logger.info("Dispatch bot stopped")


if __name__ == "__main__":
    main()
