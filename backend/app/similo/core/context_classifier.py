"""
Context Classifier

Maps an element's metadata to the page context whose weight vector is
used when scoring it. First matching rule wins.
"""

import logging
from enum import Enum
from typing import Optional, Union

from .locator import Locator

logger = logging.getLogger(__name__)


class PageContext(Enum):
    """Heuristic page/element category selecting a weight vector"""
    GENERAL = "general"
    FORM = "form"
    ECOMMERCE = "ecommerce"
    LIST = "list"
    DASHBOARD = "dashboard"

    @classmethod
    def parse(cls, label: Optional[Union[str, "PageContext"]]) -> "PageContext":
        """Resolve a label, falling back to GENERAL for unknown values"""
        if isinstance(label, PageContext):
            return label
        if not label:
            return cls.GENERAL

        normalized = str(label).strip().lower()
        if normalized == "default":
            return cls.GENERAL
        for context in cls:
            if context.value == normalized:
                return context

        logger.warning(f"[SIMILO] Unknown context '{label}', using general")
        return cls.GENERAL

    @classmethod
    def is_known(cls, label: str) -> bool:
        normalized = (label or "").strip().lower()
        return normalized == "default" or any(c.value == normalized for c in cls)


class ContextClassifier:
    """
    Deterministic, stateless context heuristic.

    Precedence:
    1. FORM - form-field tags
    2. ECOMMERCE - price/cart wording in the text or class
    3. LIST - repeating row/item structures
    4. GENERAL - everything else
    """

    FORM_TAGS = ("input", "textarea", "select", "form")
    ECOMMERCE_TEXT = ("price", "cart", "buy", "$")
    ECOMMERCE_CLASSES = ("product", "price", "cart")
    LIST_TAGS = ("li", "tr")
    LIST_CLASSES = ("list", "item", "row")

    def classify(self, locator: Locator) -> PageContext:
        tag = (locator.get_metadata("tag") or "").lower()
        css_class = (locator.get_metadata("class") or "").lower()
        text = (locator.get_metadata("visible_text") or "").lower()

        if any(t in tag for t in self.FORM_TAGS):
            return PageContext.FORM

        if any(t in text for t in self.ECOMMERCE_TEXT) or \
                any(c in css_class for c in self.ECOMMERCE_CLASSES):
            return PageContext.ECOMMERCE

        if tag in self.LIST_TAGS or any(c in css_class for c in self.LIST_CLASSES):
            return PageContext.LIST

        return PageContext.GENERAL
