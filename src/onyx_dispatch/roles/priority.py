from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

_logger = logging.getLogger(__name__)


class SystemRole(str, Enum):
    STAFF = "staff"
    DISPATCHER = "dispatcher"
    ADMINISTRATOR = "administrator"
    CEO = "ceo"


# highest priority first
DEFAULT_PRIORITY: tuple[str, ...] = (
    SystemRole.CEO.value,
    SystemRole.ADMINISTRATOR.value,
    SystemRole.DISPATCHER.value,
    SystemRole.STAFF.value,
)


class EmptyInputError(ValueError):
    """No role mappings were given to resolve."""


class RoleMapping(BaseModel):
    """Maps a Discord role to a system role."""

    model_config = ConfigDict(frozen=True)

    discord_role_id: str = ""
    discord_role_name: str = ""
    system_role: str
    auto_verify: bool = False


class ResolvedRole(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_role: str
    verified: bool


def resolve_role(
    mappings: Iterable[RoleMapping], priority: Sequence[str] = DEFAULT_PRIORITY
) -> ResolvedRole:
    """Select the mapping with the highest priority system role.

    On equal priority, the mapping encountered first wins. System roles
    missing from ``priority`` rank below all listed roles.

    :param mappings: The matched role mappings of a single member
    :param priority: System role names, from highest to lowest priority
    :return: The system role and auto-verification flag of the winning mapping
    :raises EmptyInputError: If no mappings are given
    """
    ranks = _ranks(priority)

    best: RoleMapping | None = None
    for mapping in mappings:
        if best is None or ranks.get(mapping.system_role, 0) > ranks.get(best.system_role, 0):
            best = mapping

    if best is None:
        raise EmptyInputError("Cannot resolve a system role without role mappings")

    return ResolvedRole(system_role=best.system_role, verified=best.auto_verify)


def match_mappings(
    mappings: Iterable[RoleMapping], member_role_ids: Collection[str]
) -> list[RoleMapping]:
    """Get the mappings for Discord roles held by a member, in configuration order."""
    return [mapping for mapping in mappings if mapping.discord_role_id in member_role_ids]


def resolve_member_role(
    mappings: Iterable[RoleMapping],
    member_role_ids: Collection[str],
    *,
    default_role: str = SystemRole.STAFF.value,
    priority: Sequence[str] = DEFAULT_PRIORITY,
) -> ResolvedRole:
    """Resolve the system role of a member, falling back to an unverified default role."""
    matched = match_mappings(mappings, member_role_ids)
    try:
        resolved = resolve_role(matched, priority)
    except EmptyInputError:
        _logger.debug("No matching Discord roles, falling back to %r", default_role)
        return ResolvedRole(system_role=default_role, verified=False)

    _logger.debug(
        "Resolved %s from Discord roles %s",
        resolved,
        [mapping.discord_role_name for mapping in matched],
    )
    return resolved


def _ranks(priority: Sequence[str]) -> dict[str, int]:
    # the lowest listed role ranks 1, unlisted roles rank 0
    return {role: len(priority) - index for index, role in enumerate(priority)}
