import json
from pathlib import Path

from onyx_dispatch.roles.member_store import MemberRecord, MemberStore

_RECORD = MemberRecord(
    discord_id="42", discord_username="Captain", role="dispatcher", verified=True
)


def test_with_missing_file(tmp_path: Path) -> None:
    store = MemberStore(tmp_path / "members.json")

    assert len(store) == 0
    assert store.get("42") is None


def test_with_existing_file(tmp_path: Path) -> None:
    (tmp_path / "members.json").write_text(json.dumps([_RECORD.model_dump()]))

    store = MemberStore(tmp_path / "members.json")

    assert store.get("42") == _RECORD


async def test_upsert_creates_record(tmp_path: Path) -> None:
    store = MemberStore(tmp_path / "members.json")

    created = await store.upsert(_RECORD)

    assert created
    assert store.get("42") == _RECORD
    assert json.loads((tmp_path / "members.json").read_text()) == [_RECORD.model_dump()]


async def test_upsert_updates_record(tmp_path: Path) -> None:
    store = MemberStore(tmp_path / "members.json")
    await store.upsert(_RECORD)

    demoted = _RECORD.model_copy(update={"role": "staff", "verified": False})
    created = await store.upsert(demoted)

    assert not created
    assert len(store) == 1
    assert store.get("42") == demoted


async def test_records_survive_reload(tmp_path: Path) -> None:
    store = MemberStore(tmp_path / "cache" / "members.json")
    await store.upsert(_RECORD)

    reloaded = MemberStore(tmp_path / "cache" / "members.json")

    assert reloaded.get("42") == _RECORD
