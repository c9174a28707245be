"""Append-only audit log of line-item amount edits."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .line_items import Book, ItemKind


class HistoryEntry(BaseModel):
    """One recorded amount change."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(
        default_factory=datetime.now, description="When the edit was recorded"
    )
    type: ItemKind = Field(..., description="Item kind that was edited")
    section: Book = Field(..., description="Book that was edited")
    item_id: str = Field(..., description="Edited item id")
    year: int = Field(..., description="Edited year")
    previous_value: float = Field(..., description="Amount before the edit")
    new_value: float = Field(..., description="Amount after the edit")


class HistoryLog(BaseModel):
    """Ordered edit history; entries are never changed once appended."""

    entries: List[HistoryEntry] = Field(default_factory=list)

    def append(self, entry: HistoryEntry) -> "HistoryLog":
        return HistoryLog(entries=[*self.entries, entry])

    def clear(self) -> "HistoryLog":
        return HistoryLog()

    def entries_for(self, item_id: str) -> List[HistoryEntry]:
        return [entry for entry in self.entries if entry.item_id == item_id]

    def __len__(self) -> int:
        return len(self.entries)
