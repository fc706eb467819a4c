import asyncio
import json
import logging
from pathlib import Path

import aiofiles
from pydantic import BaseModel, ConfigDict

_logger = logging.getLogger(__name__)


class MemberRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    discord_id: str
    discord_username: str
    role: str
    verified: bool = False


class MemberStore:
    def __init__(self, store_file: Path) -> None:
        """Keep the system role and verification state of guild members in a JSON file."""
        self._store_file: Path = store_file
        self._records: dict[str, MemberRecord] = {}

        self._write_lock = asyncio.Lock()

        # load previously stored members
        if store_file.exists():
            records = json.loads(store_file.read_text())
            for record in records:
                member = MemberRecord(**record)
                self._records[member.discord_id] = member
            _logger.info(f"Loaded {len(self._records)} previously stored members")
        else:
            _logger.info("File not found, starting with an empty member store (%s)", store_file)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, discord_id: str) -> MemberRecord | None:
        return self._records.get(discord_id)

    async def upsert(self, record: MemberRecord) -> bool:
        """Store a member record. Return True if the member was not stored before."""
        async with self._write_lock:
            created = record.discord_id not in self._records
            self._records[record.discord_id] = record
            _logger.debug("%s member %s", "Created" if created else "Updated", record)

            self._store_file.parent.mkdir(exist_ok=True, parents=True)
            records = [r.model_dump() for r in self._records.values()]
            async with aiofiles.open(self._store_file, mode="w") as fp:
                await fp.write(json.dumps(records, indent=2))

        return created
