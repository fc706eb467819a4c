from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel

from onyx_dispatch.roles.priority import DEFAULT_PRIORITY, RoleMapping, SystemRole


class RoleSyncConfig(BaseModel):
    # discord
    guild_id: str
    sync_command_role: str

    # role resolution
    role_mappings: Sequence[RoleMapping]
    role_priority: Sequence[str] = DEFAULT_PRIORITY
    default_role: str = SystemRole.STAFF.value

    # storage
    member_store_file: Path

    sync_interval_minutes: float = 30
