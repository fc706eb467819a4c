import pytest

from onyx_dispatch.roles.priority import (
    DEFAULT_PRIORITY,
    EmptyInputError,
    ResolvedRole,
    RoleMapping,
    SystemRole,
    match_mappings,
    resolve_member_role,
    resolve_role,
)

_MAPPINGS = [
    RoleMapping(discord_role_id="1", discord_role_name="Crew", system_role="staff"),
    RoleMapping(
        discord_role_id="2",
        discord_role_name="Dispatch",
        system_role="dispatcher",
        auto_verify=True,
    ),
    RoleMapping(discord_role_id="3", discord_role_name="Admin", system_role="administrator"),
    RoleMapping(discord_role_id="4", discord_role_name="Boss", system_role="ceo", auto_verify=True),
]


def test_highest_priority_role_wins() -> None:
    mappings = [
        RoleMapping(system_role="dispatcher", auto_verify=True),
        RoleMapping(system_role="administrator", auto_verify=False),
        RoleMapping(system_role="ceo", auto_verify=True),
    ]
    priority = ["ceo", "dispatcher", "administrator", "staff"]

    assert resolve_role(mappings, priority) == ResolvedRole(system_role="ceo", verified=True)


def test_verified_flag_belongs_to_winning_mapping() -> None:
    mappings = [
        RoleMapping(system_role="staff", auto_verify=True),
        RoleMapping(system_role="administrator", auto_verify=False),
    ]

    assert resolve_role(mappings) == ResolvedRole(system_role="administrator", verified=False)


def test_default_priority() -> None:
    assert list(DEFAULT_PRIORITY) == ["ceo", "administrator", "dispatcher", "staff"]
    mappings = [
        RoleMapping(system_role="dispatcher"),
        RoleMapping(system_role="administrator"),
    ]

    assert resolve_role(mappings).system_role == SystemRole.ADMINISTRATOR


def test_first_mapping_wins_ties() -> None:
    mappings = [
        RoleMapping(discord_role_id="a", system_role="dispatcher", auto_verify=False),
        RoleMapping(discord_role_id="b", system_role="dispatcher", auto_verify=True),
    ]

    assert resolve_role(mappings) == ResolvedRole(system_role="dispatcher", verified=False)


def test_empty_input_fails() -> None:
    with pytest.raises(EmptyInputError):
        resolve_role([])


@pytest.mark.parametrize("role", ["staff", "dispatcher", "administrator", "ceo"])
def test_unknown_role_never_wins(role: str) -> None:
    unknown = RoleMapping(system_role="unknown_role", auto_verify=True)
    known = RoleMapping(system_role=role, auto_verify=False)

    assert resolve_role([unknown, known]).system_role == role
    assert resolve_role([known, unknown]).system_role == role


def test_unknown_role_alone_is_resolved() -> None:
    mappings = [RoleMapping(system_role="crew", auto_verify=True)]

    assert resolve_role(mappings) == ResolvedRole(system_role="crew", verified=True)


def test_accepts_generators() -> None:
    resolved = resolve_role(m for m in _MAPPINGS)

    assert resolved == ResolvedRole(system_role="ceo", verified=True)


def test_match_mappings_keeps_configuration_order() -> None:
    matched = match_mappings(_MAPPINGS, {"3", "1", "99"})

    assert [m.discord_role_name for m in matched] == ["Crew", "Admin"]


def test_resolve_member_role() -> None:
    resolved = resolve_member_role(_MAPPINGS, ["2", "1"])

    assert resolved == ResolvedRole(system_role="dispatcher", verified=True)


def test_resolve_member_role_falls_back_to_default() -> None:
    resolved = resolve_member_role(_MAPPINGS, ["99"], default_role="crew")

    assert resolved == ResolvedRole(system_role="crew", verified=False)
