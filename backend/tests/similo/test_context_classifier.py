"""
Unit tests for ContextClassifier and PageContext.
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "app"))

from similo.core.context_classifier import ContextClassifier, PageContext
from similo.core.locator import Locator


class TestClassify:
    """Test the classification rules and their precedence."""

    @pytest.mark.parametrize("tag", ["input", "textarea", "select", "form"])
    def test_form_tags(self, tag):
        assert ContextClassifier().classify(Locator(tag=tag)) == PageContext.FORM

    def test_form_wins_over_ecommerce(self):
        locator = Locator(tag="input", visible_text="Add to cart", **{"class": "price"})

        assert ContextClassifier().classify(locator) == PageContext.FORM

    @pytest.mark.parametrize("text", ["Price: 10", "Add to CART", "Buy now", "$19.99"])
    def test_ecommerce_text(self, text):
        assert ContextClassifier().classify(Locator(tag="span", visible_text=text)) == PageContext.ECOMMERCE

    def test_ecommerce_class(self):
        locator = Locator(tag="div", **{"class": "product-card"})

        assert ContextClassifier().classify(locator) == PageContext.ECOMMERCE

    def test_ecommerce_wins_over_list(self):
        locator = Locator(tag="li", **{"class": "cart-item"})

        assert ContextClassifier().classify(locator) == PageContext.ECOMMERCE

    @pytest.mark.parametrize("tag", ["li", "tr", "LI"])
    def test_list_tags(self, tag):
        assert ContextClassifier().classify(Locator(tag=tag)) == PageContext.LIST

    def test_list_class(self):
        locator = Locator(tag="div", **{"class": "table-row"})

        assert ContextClassifier().classify(locator) == PageContext.LIST

    def test_general_fallback(self):
        assert ContextClassifier().classify(Locator(tag="button", visible_text="Submit")) == PageContext.GENERAL

    def test_empty_locator(self):
        assert ContextClassifier().classify(Locator()) == PageContext.GENERAL

    def test_deterministic_across_instances(self, full_locator):
        results = {ContextClassifier().classify(full_locator) for _ in range(20)}

        assert len(results) == 1


class TestPageContextParse:
    """Test label parsing."""

    def test_known_labels(self):
        for context in PageContext:
            assert PageContext.parse(context.value) == context
            assert PageContext.parse(context.value.upper()) == context

    def test_legacy_default_label(self):
        assert PageContext.parse("default") == PageContext.GENERAL

    def test_unknown_falls_back_to_general(self):
        assert PageContext.parse("checkout") == PageContext.GENERAL
        assert PageContext.parse(None) == PageContext.GENERAL
        assert PageContext.parse("") == PageContext.GENERAL

    def test_is_known(self):
        assert PageContext.is_known("form")
        assert PageContext.is_known("default")
        assert not PageContext.is_known("checkout")
