"""
Progress schemas for PageLab.

One record per catalog set, holding the completed exercise indices.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ProgressRecord(BaseModel):
    set_key: str
    completed: list[int] = []
    updated_at: Optional[datetime] = None

    @field_validator("completed")
    @classmethod
    def sort_unique(cls, value: list[int]) -> list[int]:
        return sorted(set(value))
