"""
Matching Core

Locator model, attribute similarity, context classification, scoring
and the DynamicWeightMatcher entry point.
"""

from .locator import Locator, MetricKind, AttributeDescriptor, ATTRIBUTE_TABLE, ATTRIBUTE_NAMES
from .similarity import AttributeSimilarityEngine
from .context_classifier import ContextClassifier, PageContext
from .scoring_engine import ScoringEngine, Score
from .matcher import DynamicWeightMatcher

__all__ = [
    "Locator",
    "MetricKind",
    "AttributeDescriptor",
    "ATTRIBUTE_TABLE",
    "ATTRIBUTE_NAMES",
    "AttributeSimilarityEngine",
    "ContextClassifier",
    "PageContext",
    "ScoringEngine",
    "Score",
    "DynamicWeightMatcher",
]
