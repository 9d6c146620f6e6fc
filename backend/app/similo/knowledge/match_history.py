"""
Match History

Bounded, insertion-ordered log of reported match outcomes. The learner
draws its batches from the most recent records.
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional

from ..core.context_classifier import PageContext
from ..core.locator import Locator

HISTORY_WINDOW = 1000


@dataclass(frozen=True)
class MatchRecord:
    """Snapshot of one reported match outcome"""
    target: Locator
    matched: Optional[Locator]  # None when no candidate matched at all
    success: bool
    contributions: Dict[str, float] = field(default_factory=dict)
    similarities: Dict[str, float] = field(default_factory=dict)
    context: PageContext = PageContext.GENERAL
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class MatchHistory:
    """Strict FIFO window of MatchRecords"""

    def __init__(self, window_size: int = HISTORY_WINDOW):
        self.window_size = window_size
        self._records: Deque[MatchRecord] = deque(maxlen=window_size)
        self._total_recorded = 0
        self._lock = threading.Lock()

    def append(self, record: MatchRecord):
        with self._lock:
            self._records.append(record)
            self._total_recorded += 1

    def latest(self, count: int) -> List[MatchRecord]:
        """Most recent records, oldest first"""
        with self._lock:
            if count <= 0:
                return []
            records = list(self._records)
        return records[-count:]

    def by_context(self, records: Optional[List[MatchRecord]] = None) -> Dict[PageContext, List[MatchRecord]]:
        """Group records (default: the whole window) by their context"""
        if records is None:
            records = self.snapshot()
        grouped: Dict[PageContext, List[MatchRecord]] = {}
        for record in records:
            grouped.setdefault(record.context, []).append(record)
        return grouped

    def snapshot(self) -> List[MatchRecord]:
        with self._lock:
            return list(self._records)

    def clear(self):
        """Empty the window and restart the lifetime count"""
        with self._lock:
            self._records.clear()
            self._total_recorded = 0

    @property
    def total_recorded(self) -> int:
        with self._lock:
            return self._total_recorded

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
