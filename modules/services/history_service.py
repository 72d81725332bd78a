"""In-memory generation history with a navigable cursor."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass(frozen=True, slots=True)
class HistoryRecord:
    """One completed generation or edit."""

    id: str
    source: str
    result: str
    prompt: str
    created_at: float


def _new_record_id() -> str:
    # uuid1 is time-based, so ids also reflect creation order
    return uuid.uuid1().hex


@dataclass
class GenerationHistory:
    """Newest-first list of records plus the index of the displayed one.

    ``current_index`` is always a valid position while the history is
    non-empty and ``0`` while it is empty.
    """

    records: List[HistoryRecord] = field(default_factory=list)
    current_index: int = 0

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(self.records)

    def record_result(self, source: str, result: str, prompt: str) -> HistoryRecord:
        """Prepend a record for a finished operation and make it current."""
        record = HistoryRecord(
            id=_new_record_id(),
            source=source or "",
            result=result,
            prompt=prompt,
            created_at=time.time(),
        )
        self.records.insert(0, record)
        self.current_index = 0
        return record

    def step_backward(self) -> None:
        """Move toward older records."""
        if len(self.records) <= 1:
            return
        self.current_index = min(self.current_index + 1, len(self.records) - 1)

    def step_forward(self) -> None:
        """Move toward newer records."""
        if len(self.records) <= 1:
            return
        self.current_index = max(self.current_index - 1, 0)

    def jump_to(self, index: int) -> None:
        """Select a record directly; out-of-range indices are ignored."""
        if 0 <= index < len(self.records):
            self.current_index = index

    def current(self) -> Optional[HistoryRecord]:
        """Return the displayed record, or None when the history is empty."""
        if not self.records:
            return None
        return self.records[self.current_index]

    def has_older(self) -> bool:
        return self.current_index < len(self.records) - 1

    def has_newer(self) -> bool:
        return bool(self.records) and self.current_index > 0
