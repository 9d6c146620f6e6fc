"""
Similo - Self-Healing Element Matching

Re-identifies a previously captured UI element among the elements of the
current page when its ids or paths have changed:
- Multi-attribute similarity with per-attribute metrics
- Page-context specific weight vectors
- Stability-damped weights
- Online learning of weights from reported match outcomes
"""

from .config import SimiloConfig
from .core.locator import Locator, MetricKind, AttributeDescriptor, ATTRIBUTE_TABLE
from .core.context_classifier import ContextClassifier, PageContext
from .core.similarity import AttributeSimilarityEngine
from .core.scoring_engine import ScoringEngine, Score
from .core.matcher import DynamicWeightMatcher
from .knowledge.weight_store import WeightStore
from .knowledge.persistence import WeightPersistence

__all__ = [
    "SimiloConfig",
    # Core
    "Locator",
    "MetricKind",
    "AttributeDescriptor",
    "ATTRIBUTE_TABLE",
    "ContextClassifier",
    "PageContext",
    "AttributeSimilarityEngine",
    "ScoringEngine",
    "Score",
    "DynamicWeightMatcher",
    # Knowledge
    "WeightStore",
    "WeightPersistence",
]

__version__ = "1.0.0"
