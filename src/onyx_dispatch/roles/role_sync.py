from __future__ import annotations

import logging
from collections.abc import Collection

from pydantic import BaseModel

from onyx_dispatch.roles.config import RoleSyncConfig
from onyx_dispatch.roles.discord_api_response_models import GuildMember
from onyx_dispatch.roles.discord_connector import GuildConnector
from onyx_dispatch.roles.member_store import MemberRecord, MemberStore
from onyx_dispatch.roles.priority import ResolvedRole, resolve_member_role

_logger = logging.getLogger(__name__)


class SyncReport(BaseModel):
    total: int = 0
    synced: int = 0
    created: int = 0
    updated: int = 0
    errors: list[str] = []


class RoleSync:
    def __init__(
        self, *, connector: GuildConnector, store: MemberStore, config: RoleSyncConfig
    ) -> None:
        """Derive system roles from Discord roles and store them per member."""
        self.connector = connector
        self.store = store
        self.config = config

    def resolve(self, role_ids: Collection[str]) -> ResolvedRole:
        """Resolve the system role for a set of Discord role ids."""
        return resolve_member_role(
            self.config.role_mappings,
            role_ids,
            default_role=self.config.default_role,
            priority=self.config.role_priority,
        )

    async def verify_member(self, discord_id: str) -> ResolvedRole:
        """Fetch a guild member, store their resolved role and return it.

        :raises NotAGuildMemberError: If the user is not a member of the guild
        """
        member = await self.connector.fetch_member(discord_id)
        resolved, _ = await self.apply(member)
        _logger.info("Verified %s (%s) as %s", member.display_name, discord_id, resolved)
        return resolved

    async def apply(self, member: GuildMember) -> tuple[ResolvedRole, bool]:
        """Store the resolved role of a member. Return the role and whether a record was created."""
        resolved = self.resolve(member.roles)
        created = await self.store.upsert(
            MemberRecord(
                discord_id=member.user.id,
                discord_username=member.display_name,
                role=resolved.system_role,
                verified=resolved.verified,
            )
        )
        return resolved, created

    async def sync_all_members(self) -> SyncReport:
        """Resolve and store the roles of all guild members.

        Failures for single members are collected in the report and do
        not stop the synchronisation.
        """
        members = await self.connector.fetch_all_members()
        report = SyncReport(total=len(members))

        for member in members:
            try:
                _, created = await self.apply(member)
            except Exception as e:
                _logger.exception("Failed to sync member %s", member.user.id)
                report.errors.append(f"Failed to sync {member.display_name}: {e}")
                continue

            if created:
                report.created += 1
            else:
                report.updated += 1
            report.synced += 1

        _logger.info(
            "Synced %d of %d members (%d created, %d updated, %d errors)",
            report.synced,
            report.total,
            report.created,
            report.updated,
            len(report.errors),
        )
        return report
