"""
Weight Learning Engine

Turns a batch of reported match outcomes into new weight vectors.

Update rule, per attribute:
    adjustment = learning_rate * (contribution - baseline) * success_rate
    adjustment *= stability            (only when stability < threshold)
    new_weight = clamp(old_weight * (1 + adjustment))

Batches are grouped by page context by default, so each context's vector
learns only from the matches that were scored in that context.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import SimiloConfig
from ..core.context_classifier import PageContext
from .match_history import MatchRecord
from .trackers import TrackerRegistry
from .weight_store import WeightStore

logger = logging.getLogger(__name__)


@dataclass
class AttributeEvidence:
    """What one batch says about one attribute"""
    contribution: float
    success_rate: float
    observations: int = 0


@dataclass
class WeightUpdate:
    """Result of one committed learning step for a context"""
    context: PageContext
    old_weights: List[float]
    new_weights: List[float]
    records_used: int
    adjustments: Dict[str, float] = field(default_factory=dict)


class WeightLearner:
    """
    Batched, bounded weight updates.

    The learner holds no lock of its own: the caller serialises calls to
    update_weights() inside its batch critical section.
    """

    def __init__(self, config: SimiloConfig, store: WeightStore, trackers: TrackerRegistry):
        self.config = config
        self.store = store
        self.trackers = trackers
        self.updates_applied = 0

    def update_weights(
        self,
        batch: List[MatchRecord],
        pinned_context: Optional[PageContext] = None
    ) -> List[WeightUpdate]:
        """
        Apply one learning step and commit the new vectors.

        Args:
            batch: Most recent match records
            pinned_context: Context forced by single-context mode, if any

        Returns:
            One WeightUpdate per committed context
        """
        if self.config.group_by_context:
            groups = {}
            for record in batch:
                groups.setdefault(record.context, []).append(record)
            updates = [
                self._update_context(context, self._evidence_from_records(records), len(records))
                for context, records in groups.items()
            ]
        else:
            context = pinned_context or PageContext.GENERAL
            updates = [self._update_context(context, self._evidence_from_trackers(), len(batch))]

        self.updates_applied += 1
        for update in updates:
            logger.info(
                f"[LEARNING] Updated '{update.context.value}' weights from "
                f"{update.records_used} matches"
            )
        return updates

    def _update_context(
        self,
        context: PageContext,
        evidence: Dict[str, AttributeEvidence],
        records_used: int
    ) -> WeightUpdate:
        old_weights = self.store.get_weights(context)
        new_weights = list(old_weights)
        adjustments: Dict[str, float] = {}

        for i, attribute in enumerate(self.store.attributes):
            attr_evidence = evidence.get(attribute)
            if attr_evidence is None:
                continue

            adjustment = self.compute_adjustment(
                attr_evidence.contribution,
                attr_evidence.success_rate,
                self.trackers.stability_score(attribute)
            )
            adjustments[attribute] = adjustment
            new_weights[i] = self.config.clamp(old_weights[i] * (1 + adjustment))

        # Replace, not merge
        self.store.set_weights(context, new_weights)

        return WeightUpdate(
            context=context,
            old_weights=old_weights,
            new_weights=self.store.get_weights(context),
            records_used=records_used,
            adjustments=adjustments
        )

    def compute_adjustment(self, contribution: float, success_rate: float, stability: float) -> float:
        adjustment = (
            self.config.learning_rate
            * (contribution - self.config.baseline_contribution)
            * success_rate
        )
        if stability < self.config.stability_threshold:
            adjustment *= stability
        return adjustment

    def _evidence_from_records(self, records: List[MatchRecord]) -> Dict[str, AttributeEvidence]:
        """Average similarity and success share per attribute within one context group"""
        evidence: Dict[str, AttributeEvidence] = {}

        for attribute in self.store.attributes:
            observed = [r for r in records if attribute in r.similarities]
            if not observed:
                continue

            contribution = sum(r.similarities[attribute] for r in observed) / len(observed)
            evidence[attribute] = AttributeEvidence(
                contribution=contribution,
                success_rate=self._success_rate(attribute, observed),
                observations=len(observed)
            )

        return evidence

    def _evidence_from_trackers(self) -> Dict[str, AttributeEvidence]:
        evidence: Dict[str, AttributeEvidence] = {}

        for attribute in self.store.attributes:
            tracker = self.trackers.contribution[attribute]
            if len(tracker) == 0:
                continue
            evidence[attribute] = AttributeEvidence(
                contribution=tracker.get_average_contribution(),
                success_rate=self._success_rate(attribute),
                observations=len(tracker)
            )

        return evidence

    def _success_rate(self, attribute: str, observed: Optional[List[MatchRecord]] = None) -> float:
        mode = self.config.success_rate_mode
        if mode == "none":
            return 1.0
        tracker = self.trackers.contribution[attribute]
        if mode == "all_time":
            return tracker.get_success_rate()
        if observed:
            return sum(1 for r in observed if r.success) / len(observed)
        return tracker.get_windowed_success_rate()
