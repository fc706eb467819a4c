from __future__ import annotations

from pydantic import BaseModel


class ContractsConfig(BaseModel):
    max_split_participants: int = 25
