"""
Dynamic Weight Matcher

The public entry point: scores candidates against a target locator and
learns attribute weights from the outcomes the caller reports back.

Workflow:
1. Caller scores / ranks candidates for a target
2. Caller picks a winner and reports the outcome via record_match()
3. Every `batch_size` reports, the learner commits new weights
4. Later scoring uses the updated weights
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..config import SimiloConfig
from ..knowledge.learning_engine import WeightLearner, WeightUpdate
from ..knowledge.match_history import MatchHistory, MatchRecord
from ..knowledge.persistence import WeightPersistence
from ..knowledge.trackers import TrackerRegistry
from ..knowledge.weight_store import WeightStore
from .context_classifier import ContextClassifier, PageContext
from .locator import ATTRIBUTE_NAMES, BASE_WEIGHTS, Locator
from .scoring_engine import Score, ScoringEngine
from .similarity import AttributeSimilarityEngine

logger = logging.getLogger(__name__)

ContextLike = Union[PageContext, str, None]


class DynamicWeightMatcher:
    """
    Self-healing element matcher with learned attribute weights.

    Every instance owns its trackers, history and weight store; nothing is
    shared between instances. All methods are safe to call from several
    worker threads at once.
    """

    def __init__(self, config: Optional[SimiloConfig] = None):
        self.config = config or SimiloConfig()
        self.classifier = ContextClassifier()
        self.similarity = AttributeSimilarityEngine(max_distance=self.config.max_distance)
        self.store = WeightStore(
            base_weights=BASE_WEIGHTS,
            attributes=ATTRIBUTE_NAMES,
            weight_min=self.config.weight_min,
            weight_max=self.config.weight_max
        )
        self.persistence: Optional[WeightPersistence] = (
            WeightPersistence(self.config.weights_file) if self.config.weights_file else None
        )

        # Built once; reset_weights() clears them in place
        self.trackers = TrackerRegistry(
            ATTRIBUTE_NAMES,
            contribution_window=self.config.contribution_window,
            stability_window=self.config.stability_window,
            baseline=self.config.baseline_contribution
        )
        self.history = MatchHistory(window_size=self.config.history_window)
        self.engine = ScoringEngine(self.store, self.trackers, self.similarity, self.classifier)
        self.learner = WeightLearner(self.config, self.store, self.trackers)

        self._pinned_context: Optional[PageContext] = None
        self._batch_lock = threading.Lock()
        self._batch_counter = 0

    # ==================== Context ====================

    def set_context(self, context: ContextLike):
        """Pin scoring and learning to one context; None restores classification"""
        self._pinned_context = PageContext.parse(context) if context is not None else None
        label = self._pinned_context.value if self._pinned_context else "auto"
        logger.info(f"[SIMILO] Context switched to: {label}")

    def get_context(self) -> Optional[PageContext]:
        return self._pinned_context

    def classify(self, locator: Locator) -> PageContext:
        return self.classifier.classify(locator)

    def _resolve_context(self, locator: Locator, context: ContextLike = None) -> PageContext:
        if context is not None:
            return PageContext.parse(context)
        if self._pinned_context is not None:
            return self._pinned_context
        return self.classifier.classify(locator)

    # ==================== Scoring ====================

    def score(self, target: Locator, candidate: Locator, context: ContextLike = None) -> Score:
        return self.engine.score(target, candidate, self._resolve_context(candidate, context))

    def similarity_score(self, target: Locator, candidate: Locator) -> float:
        return self.score(target, candidate).total

    def rank_candidates(
        self,
        target: Locator,
        candidates: Iterable[Locator]
    ) -> List[Tuple[Locator, Score]]:
        """Score every candidate, best first (ties keep input order)"""
        scored = [(candidate, self.score(target, candidate)) for candidate in candidates]
        scored.sort(key=lambda item: item[1].total, reverse=True)
        return scored

    # ==================== Outcome Reporting ====================

    def record_match(self, target: Locator, matched: Locator, success: bool) -> List[WeightUpdate]:
        """
        Report the outcome of using `matched` for `target`.

        Similarities are recomputed from the two locators. Returns the
        weight updates committed by this call (empty unless it closed a batch).
        """
        context = self._resolve_context(matched)
        score = self.engine.score(target, matched, context, track_stability=False)

        record = MatchRecord(
            target=target,
            matched=matched,
            success=success,
            contributions=score.contributions,
            similarities=score.similarities,
            context=context
        )
        return self._commit(record)

    def record_successful_match(self, target: Locator, matched: Locator) -> List[WeightUpdate]:
        return self.record_match(target, matched, True)

    def record_failed_match(self, target: Locator) -> List[WeightUpdate]:
        """Report that no candidate could be matched for `target`"""
        context = self._resolve_context(target)
        similarities = {name: 0.0 for name in target.scored_attributes()}

        record = MatchRecord(
            target=target,
            matched=None,
            success=False,
            contributions=dict(similarities),
            similarities=similarities,
            context=context
        )
        return self._commit(record)

    def _commit(self, record: MatchRecord) -> List[WeightUpdate]:
        """
        Push a record into the trackers and history and count it.

        All of it happens under the batch lock, so every batch the learner
        sees is exactly the records counted since the previous batch.
        """
        updates: List[WeightUpdate] = []
        with self._batch_lock:
            for attribute, similarity in record.similarities.items():
                self.trackers.contribution[attribute].add_contribution(similarity, record.success)
            self.history.append(record)

            self._batch_counter += 1
            if self._batch_counter >= self.config.batch_size:
                updates = self._learn_locked()

        if updates:
            self._auto_save()
        return updates

    def _learn_locked(self) -> List[WeightUpdate]:
        batch = self.history.latest(self.config.batch_size)
        self._batch_counter = 0
        if not batch:
            logger.info("[LEARNING] No recorded matches, nothing to learn")
            return []
        return self.learner.update_weights(batch, self._pinned_context)

    def update_weights(self) -> List[WeightUpdate]:
        """Force a learning step on the most recent batch"""
        with self._batch_lock:
            updates = self._learn_locked()
        if updates:
            self._auto_save()
        return updates

    # ==================== Weights ====================

    def get_weights(self, context: ContextLike = PageContext.GENERAL) -> Dict[str, float]:
        return self.store.as_dict(PageContext.parse(context))

    def get_weight(self, attribute: str, context: ContextLike = PageContext.GENERAL) -> float:
        return self.store.get_weight(attribute, PageContext.parse(context))

    def reset_weights(self):
        """Back to base weights with cleared trackers and an empty history"""
        with self._batch_lock:
            self.store.reset()
            self.trackers.clear()
            self.history.clear()
            self.learner.updates_applied = 0
            self._batch_counter = 0
        logger.info("[WEIGHTS] Weights reset to initial values")

    def get_weight_statistics(self, context: ContextLike = PageContext.GENERAL) -> Dict[str, Dict[str, Any]]:
        weights = self.get_weights(context)
        stats = {}
        for attribute in ATTRIBUTE_NAMES:
            stats[attribute] = {"weight": weights[attribute], **self.trackers.get_stats(attribute)}
        return stats

    def format_weight_statistics(self, context: ContextLike = PageContext.GENERAL) -> str:
        resolved = PageContext.parse(context)
        return format_statistics_table(resolved.value, self.get_weight_statistics(resolved))

    def get_stats(self) -> Dict[str, Any]:
        with self._batch_lock:
            pending = self._batch_counter
        return {
            "pinned_context": self._pinned_context.value if self._pinned_context else None,
            "matches_recorded": self.history.total_recorded,
            "history_size": len(self.history),
            "pending_in_batch": pending,
            "updates_applied": self.learner.updates_applied,
            "weights_file": str(self.persistence.path) if self.persistence else None,
        }

    # ==================== Persistence ====================

    def _persistence_for(self, path: Optional[str]) -> Optional[WeightPersistence]:
        if path:
            return WeightPersistence(path)
        return self.persistence

    def save_weights(self, path: Optional[str] = None) -> bool:
        persistence = self._persistence_for(path)
        if persistence is None:
            logger.warning("[WEIGHTS] No weights file configured, nothing saved")
            return False
        return persistence.save(self.store, self._pinned_context)

    def load_weights(self, path: Optional[str] = None) -> bool:
        persistence = self._persistence_for(path)
        if persistence is None:
            logger.warning("[WEIGHTS] No weights file configured, nothing loaded")
            return False

        loaded, pinned = persistence.load(self.store)
        if loaded and pinned is not None:
            self.set_context(pinned)
        return loaded

    def _auto_save(self):
        if self.persistence is not None and self.config.auto_save:
            self.persistence.save(self.store, self._pinned_context)


def format_statistics_table(context_label: str, stats: Dict[str, Dict[str, Any]]) -> str:
    """Fixed-width weight statistics table"""
    lines = [
        "=== Dynamic Weight Statistics ===",
        f"Context: {context_label}",
        "",
        f"{'Attribute':<14}| {'Weight':>6} | {'Avg Contrib':>11} | {'Success Rate':>12} | {'Stability':>9}",
        f"{'-' * 14}|{'-' * 8}|{'-' * 13}|{'-' * 14}|{'-' * 10}",
    ]
    for attribute, row in stats.items():
        lines.append(
            f"{attribute:<14}| {row['weight']:>6.3f} | {row['average_contribution']:>11.3f} | "
            f"{row['success_rate'] * 100:>11.2f}% | {row['stability']:>9.3f}"
        )
    return "\n".join(lines)
