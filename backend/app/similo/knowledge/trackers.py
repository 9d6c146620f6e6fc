"""
Attribute Trackers

Per-attribute rolling statistics feeding the weight learner:
- ContributionTracker: recent similarity contributions and match outcomes
- StabilityTracker: how often the observed value of an attribute changes

Each tracker owns its lock; pushes and evictions are atomic.
"""

import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

BASELINE_CONTRIBUTION = 0.5
CONTRIBUTION_WINDOW = 1000
STABILITY_WINDOW = 100


class ContributionTracker:
    """Sliding window of (contribution, success) pairs plus all-time counters"""

    def __init__(
        self,
        attribute: str,
        window_size: int = CONTRIBUTION_WINDOW,
        baseline: float = BASELINE_CONTRIBUTION
    ):
        self.attribute = attribute
        self.window_size = window_size
        self.baseline = baseline
        self._window: Deque[Tuple[float, bool]] = deque(maxlen=window_size)
        self._window_successes = 0
        self._successful_matches = 0
        self._total_matches = 0
        self._lock = threading.Lock()

    def add_contribution(self, score: float, was_successful: bool):
        with self._lock:
            if len(self._window) == self.window_size:
                _, old_success = self._window[0]
                if old_success:
                    self._window_successes -= 1
            self._window.append((score, was_successful))
            if was_successful:
                self._window_successes += 1

            self._total_matches += 1
            if was_successful:
                self._successful_matches += 1

    def get_average_contribution(self) -> float:
        with self._lock:
            if not self._window:
                return self.baseline
            return sum(score for score, _ in self._window) / len(self._window)

    def get_success_rate(self) -> float:
        """All-time success rate since this tracker was created"""
        with self._lock:
            if self._total_matches == 0:
                return 0.5
            return self._successful_matches / self._total_matches

    def get_windowed_success_rate(self) -> float:
        with self._lock:
            if not self._window:
                return 0.5
            return self._window_successes / len(self._window)

    def clear(self):
        """Drop the window and the all-time counters"""
        with self._lock:
            self._window.clear()
            self._window_successes = 0
            self._successful_matches = 0
            self._total_matches = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._window)

    def snapshot(self) -> List[Tuple[float, bool]]:
        with self._lock:
            return list(self._window)


class StabilityTracker:
    """
    Window of recently observed raw values with a running count of
    adjacent-pair changes inside the window.
    """

    def __init__(self, attribute: str, window_size: int = STABILITY_WINDOW):
        self.attribute = attribute
        self.window_size = window_size
        self._values: Deque[str] = deque(maxlen=window_size)
        self._transitions = 0
        self._lock = threading.Lock()

    def add_value(self, value: str):
        with self._lock:
            if len(self._values) == self.window_size:
                evicted = self._values[0]
                if len(self._values) > 1 and self._values[1] != evicted:
                    self._transitions -= 1
            if self._values and self._values[-1] != value:
                self._transitions += 1
            self._values.append(value)

    def get_stability_score(self) -> float:
        """1.0 = never changes; fewer than two observations count as stable"""
        with self._lock:
            if len(self._values) < 2:
                return 1.0
            change_rate = self._transitions / len(self._values)
            return 1.0 - min(change_rate, 1.0)

    def clear(self):
        with self._lock:
            self._values.clear()
            self._transitions = 0

    @property
    def transitions(self) -> int:
        with self._lock:
            return self._transitions

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self._values)


class TrackerRegistry:
    """Exactly one contribution and one stability tracker per attribute"""

    def __init__(
        self,
        attributes,
        contribution_window: int = CONTRIBUTION_WINDOW,
        stability_window: int = STABILITY_WINDOW,
        baseline: float = BASELINE_CONTRIBUTION
    ):
        self.attributes = tuple(attributes)
        self.contribution: Dict[str, ContributionTracker] = {
            name: ContributionTracker(name, contribution_window, baseline)
            for name in self.attributes
        }
        self.stability: Dict[str, StabilityTracker] = {
            name: StabilityTracker(name, stability_window)
            for name in self.attributes
        }

    def clear(self):
        for tracker in self.contribution.values():
            tracker.clear()
        for tracker in self.stability.values():
            tracker.clear()

    def stability_score(self, attribute: str) -> float:
        tracker: Optional[StabilityTracker] = self.stability.get(attribute)
        return tracker.get_stability_score() if tracker else 1.0

    def get_stats(self, attribute: str) -> Dict[str, Any]:
        contribution = self.contribution[attribute]
        return {
            "average_contribution": contribution.get_average_contribution(),
            "success_rate": contribution.get_success_rate(),
            "windowed_success_rate": contribution.get_windowed_success_rate(),
            "observations": len(contribution),
            "stability": self.stability[attribute].get_stability_score(),
        }
