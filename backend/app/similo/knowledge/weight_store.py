"""
Weight Store

Per-context weight vectors, bounded on every write. Readers always get a
copy, so a scoring call never sees a half-committed vector.
"""

import threading
from typing import Dict, List, Optional, Sequence

from ..core.context_classifier import PageContext
from ..core.locator import ATTRIBUTE_NAMES, BASE_WEIGHTS

WEIGHT_MIN = 0.1
WEIGHT_MAX = 3.0


# Multipliers layered on the learned vector when scoring in a context
CONTEXT_MODIFIERS: Dict[PageContext, Dict[str, float]] = {
    PageContext.FORM: {
        "name": 1.3,
        "id": 1.3,
        "visible_text": 1.2,
        "class": 0.7,
    },
    PageContext.ECOMMERCE: {
        "visible_text": 1.5,
        "name": 1.3,
        "id": 1.3,
        "class": 0.8,
    },
    PageContext.LIST: {
        "tag": 1.2,
        "class": 1.2,
    },
    PageContext.GENERAL: {},
    PageContext.DASHBOARD: {},
}


class WeightStore:
    """
    Holds one weight vector per PageContext plus a default vector.

    Features:
    - Defensive copies on read and write
    - Clamping to [weight_min, weight_max] on every write
    - Whole-vector replace per commit
    """

    def __init__(
        self,
        base_weights: Sequence[float] = BASE_WEIGHTS,
        attributes: Sequence[str] = ATTRIBUTE_NAMES,
        weight_min: float = WEIGHT_MIN,
        weight_max: float = WEIGHT_MAX,
        modifiers: Optional[Dict[PageContext, Dict[str, float]]] = None
    ):
        if len(base_weights) != len(attributes):
            raise ValueError("base_weights and attributes must have the same length")

        self.attributes = tuple(attributes)
        self.weight_min = weight_min
        self.weight_max = weight_max
        self.modifiers = modifiers if modifiers is not None else CONTEXT_MODIFIERS
        self._base = self._clamp_vector(base_weights)
        self._default: List[float] = list(self._base)
        self._vectors: Dict[PageContext, List[float]] = {}
        self._lock = threading.RLock()
        self.reset()

    def _clamp_vector(self, vector: Sequence[float]) -> List[float]:
        return [max(self.weight_min, min(self.weight_max, float(w))) for w in vector]

    def reset(self):
        """Every context back to a fresh copy of the base vector"""
        with self._lock:
            self._default = list(self._base)
            self._vectors = {context: list(self._base) for context in PageContext}

    def get_weights(self, context: Optional[PageContext] = None) -> List[float]:
        """Raw learned vector for a context (copy); unset contexts use the default"""
        with self._lock:
            if context is None:
                return list(self._default)
            vector = self._vectors.get(context)
            if vector is None:
                return list(self._default)
            return list(vector)

    def set_weights(self, context: Optional[PageContext], vector: Sequence[float]):
        """Replace a context's vector; None targets the default vector"""
        if len(vector) != len(self.attributes):
            raise ValueError(
                f"Expected {len(self.attributes)} weights, got {len(vector)}"
            )
        clamped = self._clamp_vector(vector)
        with self._lock:
            if context is None:
                self._default = clamped
            else:
                self._vectors[context] = clamped

    def get_weights_for_context(self, context: PageContext) -> List[float]:
        """Learned vector with the context modifier table applied, for scoring"""
        weights = self.get_weights(context)
        modifiers = self.modifiers.get(context, {})
        return [
            w * modifiers.get(name, 1.0)
            for name, w in zip(self.attributes, weights)
        ]

    def get_weight(self, attribute: str, context: Optional[PageContext] = None) -> float:
        """Raw weight of one attribute, 0.0 for an unknown attribute"""
        if attribute not in self.attributes:
            return 0.0
        return self.get_weights(context)[self.attributes.index(attribute)]

    def as_dict(self, context: Optional[PageContext] = None) -> Dict[str, float]:
        return dict(zip(self.attributes, self.get_weights(context)))

    def snapshot(self) -> Dict[Optional[PageContext], List[float]]:
        """Consistent copy of every vector, keyed by context (None = default)"""
        with self._lock:
            data: Dict[Optional[PageContext], List[float]] = {None: list(self._default)}
            for context in PageContext:
                data[context] = list(self._vectors.get(context, self._default))
            return data

    def __eq__(self, other) -> bool:
        if not isinstance(other, WeightStore):
            return NotImplemented
        mine = self.snapshot()
        theirs = other.snapshot()
        return all(
            len(mine[k]) == len(theirs[k]) and
            all(abs(a - b) <= 1e-6 for a, b in zip(mine[k], theirs[k]))
            for k in mine
        )

    __hash__ = None
