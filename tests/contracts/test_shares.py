from decimal import Decimal

import pytest

from onyx_dispatch.contracts.shares import (
    InvalidShareError,
    Participant,
    allocate_shares,
    changed_shares,
    check_manual_shares,
    format_uec,
    payout_for,
)


def _participants(*shares: float | None) -> list[Participant]:
    """Create participants, None for an automatic share, a number for a manual share."""
    return [
        Participant(id=f"p{i}")
        if share is None
        else Participant(id=f"p{i}", share_percentage=share, manual_override=True)
        for i, share in enumerate(shares)
    ]


@pytest.mark.parametrize(
    "shares",
    [
        (None,),
        (None, None, None),
        (50, None, None, None),
        (10, 20.5, None),
        (100, None),
        (33.3, None, None, None, None, None, None),
    ],
)
def test_shares_sum_to_100(shares: tuple[float | None, ...]) -> None:
    allocated = allocate_shares(_participants(*shares))

    assert sum(p.share_percentage for p in allocated) == pytest.approx(100, abs=1e-9)


def test_manual_shares_are_preserved() -> None:
    participants = _participants(12.5, None, 30, None)

    allocated = allocate_shares(participants)

    assert allocated[0] == participants[0]
    assert allocated[2] == participants[2]


def test_automatic_shares_are_equal() -> None:
    allocated = allocate_shares(_participants(50, None, None, None))

    assert allocated[0].share_percentage == 50
    assert allocated[1].share_percentage == allocated[2].share_percentage
    assert allocated[2].share_percentage == allocated[3].share_percentage
    assert allocated[1].share_percentage == pytest.approx(100 / 6)


def test_order_and_membership_are_kept() -> None:
    participants = _participants(None, 40, None)

    allocated = allocate_shares(participants)

    assert [p.id for p in allocated] == ["p0", "p1", "p2"]


def test_allocation_is_idempotent() -> None:
    once = allocate_shares(_participants(20, None, None))

    assert allocate_shares(once) == once


def test_all_manual_shares_are_returned_unchanged() -> None:
    participants = _participants(60, 30)

    assert allocate_shares(participants) == participants


def test_empty_contract() -> None:
    assert allocate_shares([]) == []


def test_existing_automatic_shares_are_overwritten() -> None:
    participants = [Participant(id="a", share_percentage=100), Participant(id="b")]

    allocated = allocate_shares(participants)

    assert [p.share_percentage for p in allocated] == [50, 50]


def test_manual_shares_above_100_produce_negative_shares() -> None:
    allocated = allocate_shares(_participants(80, 40, None, None))

    assert allocated[2].share_percentage == pytest.approx(-10)
    assert allocated[3].share_percentage == pytest.approx(-10)


def test_check_rejects_manual_shares_above_100() -> None:
    with pytest.raises(InvalidShareError, match="more than 100%"):
        check_manual_shares(_participants(80, 40, None))


@pytest.mark.parametrize("share", [-1, 100.5])
def test_check_rejects_manual_share_out_of_range(share: float) -> None:
    with pytest.raises(InvalidShareError, match="out of range"):
        check_manual_shares(_participants(share, None))


def test_check_accepts_valid_manual_shares() -> None:
    check_manual_shares(_participants(50, 50, None))


def test_check_ignores_automatic_shares() -> None:
    participants = [Participant(id="a", share_percentage=250)]

    check_manual_shares(participants)


def test_changed_shares() -> None:
    before = _participants(50, None, None)
    after = allocate_shares(before)

    assert [p.id for p in changed_shares(before, after)] == ["p1", "p2"]
    assert changed_shares(after, allocate_shares(after)) == []


def test_payout_of_equal_split() -> None:
    allocated = allocate_shares(_participants(50, None, None, None))

    payouts = [payout_for(p.share_percentage, 1_000_000) for p in allocated]

    assert payouts == [
        Decimal("500000.00"),
        Decimal("166666.67"),
        Decimal("166666.67"),
        Decimal("166666.67"),
    ]


def test_payout_rounds_half_up() -> None:
    assert payout_for(12.5, 100.1) == Decimal("12.51")


@pytest.mark.parametrize(
    ("amount", "result"),
    [
        (1_000_000, "1,000,000 UEC"),
        (1234.5, "1,234.5 UEC"),
        (Decimal("166666.67"), "166,666.67 UEC"),
        (0, "0 UEC"),
    ],
)
def test_format_uec(amount: float | Decimal, result: str) -> None:
    assert format_uec(amount) == result
