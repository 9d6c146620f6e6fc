"""
Scoring Engine

Weighted multi-attribute similarity between a target locator and a
candidate:

    effective_weight = learned_weight * context_modifier * (0.5 + 0.5 * stability)
    contribution     = similarity * effective_weight
    total            = sum of contributions over attributes present on both sides

The total is unbounded above; ranking and acceptance belong to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..knowledge.trackers import TrackerRegistry
from ..knowledge.weight_store import WeightStore
from .context_classifier import ContextClassifier, PageContext
from .locator import ATTRIBUTE_TABLE, Locator
from .similarity import AttributeSimilarityEngine

logger = logging.getLogger(__name__)


@dataclass
class Score:
    """Outcome of scoring one candidate"""
    total: float
    contributions: Dict[str, float] = field(default_factory=dict)
    similarities: Dict[str, float] = field(default_factory=dict)
    context: PageContext = PageContext.GENERAL

    def to_dict(self) -> Dict:
        return {
            "total": self.total,
            "context": self.context.value,
            "contributions": dict(self.contributions),
            "similarities": dict(self.similarities),
        }


class ScoringEngine:
    """Combines similarity, context, stability and learned weights"""

    def __init__(
        self,
        store: WeightStore,
        trackers: TrackerRegistry,
        similarity: Optional[AttributeSimilarityEngine] = None,
        classifier: Optional[ContextClassifier] = None
    ):
        self.store = store
        self.trackers = trackers
        self.similarity = similarity or AttributeSimilarityEngine()
        self.classifier = classifier or ContextClassifier()

    def score(
        self,
        target: Locator,
        candidate: Locator,
        context: Optional[PageContext] = None,
        track_stability: bool = True
    ) -> Score:
        """
        Score a candidate against the target.

        Args:
            target: The previously captured element
            candidate: An element from the current page
            context: Force a context instead of classifying the candidate
            track_stability: Feed the candidate's values into the
                stability trackers (the normal scoring side effect)
        """
        if context is None:
            context = self.classifier.classify(candidate)

        # One consistent copy of the vector for the whole call
        weights = self.store.get_weights_for_context(context)

        total = 0.0
        contributions: Dict[str, float] = {}
        similarities: Dict[str, float] = {}

        for index, descriptor in enumerate(ATTRIBUTE_TABLE):
            name = descriptor.name
            target_value = target.get_metadata(name)
            candidate_value = candidate.get_metadata(name)
            if target_value is None or candidate_value is None:
                continue

            stability = self.trackers.stability_score(name)
            effective_weight = weights[index] * (0.5 + 0.5 * stability)

            similarity = self.similarity.similarity(descriptor.metric, target_value, candidate_value)
            contribution = similarity * effective_weight

            similarities[name] = similarity
            contributions[name] = contribution
            total += contribution

            if track_stability:
                self.trackers.stability[name].add_value(candidate_value)

        logger.debug(f"[SIMILO] Scored {candidate!r} in '{context.value}': {total:.3f}")
        return Score(
            total=total,
            contributions=contributions,
            similarities=similarities,
            context=context
        )

    def max_score(self, target: Locator, candidate: Locator, context: PageContext) -> float:
        """Sum of effective weights over attributes present on both sides"""
        weights = self.store.get_weights_for_context(context)
        return sum(
            weights[i] * (0.5 + 0.5 * self.trackers.stability_score(d.name))
            for i, d in enumerate(ATTRIBUTE_TABLE)
            if target.get_metadata(d.name) is not None and candidate.get_metadata(d.name) is not None
        )
