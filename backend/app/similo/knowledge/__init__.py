"""
Learned Weight State

Rolling attribute statistics, match history, per-context weight vectors,
the batched weight learner and weight file persistence.
"""

from .trackers import ContributionTracker, StabilityTracker, TrackerRegistry
from .match_history import MatchHistory, MatchRecord
from .weight_store import WeightStore, CONTEXT_MODIFIERS
from .learning_engine import WeightLearner, WeightUpdate
from .persistence import WeightPersistence

__all__ = [
    "ContributionTracker",
    "StabilityTracker",
    "TrackerRegistry",
    "MatchHistory",
    "MatchRecord",
    "WeightStore",
    "CONTEXT_MODIFIERS",
    "WeightLearner",
    "WeightUpdate",
    "WeightPersistence",
]
