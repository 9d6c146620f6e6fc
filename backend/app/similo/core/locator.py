"""
Locator Model

A Locator is the attribute bag captured for one UI element. The fixed
attribute table decides which keys take part in scoring, in what order,
with which similarity metric and with which starting weight.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, Tuple


class MetricKind(Enum):
    """Similarity metrics available for an attribute"""
    EXACT = "exact"
    STRING_EDIT = "string_edit"
    NUMERIC = "numeric"
    SPATIAL = "spatial"
    TOKEN_OVERLAP = "token_overlap"


@dataclass(frozen=True)
class AttributeDescriptor:
    """Static description of a scored attribute"""
    name: str
    metric: MetricKind
    base_weight: float


ATTRIBUTE_TABLE: Tuple[AttributeDescriptor, ...] = (
    AttributeDescriptor("tag", MetricKind.EXACT, 1.5),
    AttributeDescriptor("class", MetricKind.STRING_EDIT, 0.5),
    AttributeDescriptor("name", MetricKind.EXACT, 1.5),
    AttributeDescriptor("id", MetricKind.EXACT, 1.5),
    AttributeDescriptor("href", MetricKind.STRING_EDIT, 0.5),
    AttributeDescriptor("alt", MetricKind.STRING_EDIT, 0.5),
    AttributeDescriptor("xpath", MetricKind.STRING_EDIT, 0.5),
    AttributeDescriptor("idxpath", MetricKind.STRING_EDIT, 0.5),
    AttributeDescriptor("is_button", MetricKind.EXACT, 0.5),
    AttributeDescriptor("location", MetricKind.SPATIAL, 0.5),
    AttributeDescriptor("area", MetricKind.NUMERIC, 0.5),
    AttributeDescriptor("shape", MetricKind.NUMERIC, 0.5),
    AttributeDescriptor("visible_text", MetricKind.STRING_EDIT, 1.5),
    AttributeDescriptor("neighbor_text", MetricKind.TOKEN_OVERLAP, 1.5),
)

ATTRIBUTE_NAMES: Tuple[str, ...] = tuple(d.name for d in ATTRIBUTE_TABLE)

BASE_WEIGHTS: Tuple[float, ...] = tuple(d.base_weight for d in ATTRIBUTE_TABLE)


def attribute_index(name: str) -> int:
    """Position of an attribute in the table, -1 if unknown"""
    try:
        return ATTRIBUTE_NAMES.index(name)
    except ValueError:
        return -1


class Locator(Mapping):
    """
    Immutable attribute-name -> value bag describing one element snapshot.

    Values are stored as strings; None values are treated as absent.
    The spatial "location" attribute is derived as "x,y" when the locator
    carries separate x and y coordinates.
    """

    __slots__ = ("_metadata",)

    def __init__(self, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        data: Dict[str, str] = {}
        for source in (metadata or {}, kwargs):
            for key, value in source.items():
                if value is None:
                    continue
                if isinstance(value, bool):
                    value = "true" if value else "false"
                data[str(key)] = str(value)

        if "location" not in data and "x" in data and "y" in data:
            data["location"] = f"{data['x']},{data['y']}"

        self._metadata = MappingProxyType(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Locator":
        return cls(data)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._metadata)

    def get_metadata(self, name: str) -> Optional[str]:
        """Value of an attribute, None when absent"""
        return self._metadata.get(name)

    def scored_attributes(self) -> List[str]:
        """Table attributes present on this locator, in table order"""
        return [name for name in ATTRIBUTE_NAMES if name in self._metadata]

    def __getitem__(self, key: str) -> str:
        return self._metadata[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._metadata)

    def __len__(self) -> int:
        return len(self._metadata)

    def __hash__(self) -> int:
        return hash(frozenset(self._metadata.items()))

    def __eq__(self, other) -> bool:
        if isinstance(other, Locator):
            return dict(self._metadata) == dict(other._metadata)
        return NotImplemented

    def __repr__(self) -> str:
        shown = ", ".join(
            f"{k}={self._metadata[k]!r}" for k in ("tag", "id", "name") if k in self._metadata
        )
        return f"Locator({shown or len(self._metadata)})"
