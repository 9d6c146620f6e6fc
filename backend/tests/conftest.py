"""
Pytest configuration and shared fixtures for Similo tests.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock
from typing import Any, Dict

# Add backend app to path
sys.path.insert(0, str(Path(__file__).parent.parent / "app"))

from similo import DynamicWeightMatcher, Locator, SimiloConfig


# ==================== Locator Builders ====================

def make_product_locator(visible_text: str, element_id: str, class_name: str) -> Locator:
    """Product card element as captured on a shop page"""
    return Locator({
        "tag": "div",
        "class": class_name,
        "id": element_id,
        "visible_text": visible_text,
        "xpath": f"//div[@id='{element_id}']",
        "x": "100",
        "y": "200",
        "width": "300",
        "height": "50",
        "area": "15000",
        "shape": "600",
    })


def make_form_locator(name: str, element_id: str, placeholder: str) -> Locator:
    """Form input element"""
    return Locator({
        "tag": "input",
        "name": name,
        "id": element_id,
        "visible_text": placeholder,
        "xpath": f"//input[@name='{name}']",
        "x": "50",
        "y": "100",
        "width": "200",
        "height": "30",
        "area": "6000",
        "shape": "667",
    })


@pytest.fixture
def product_locator():
    return make_product_locator


@pytest.fixture
def form_locator():
    return make_form_locator


@pytest.fixture
def full_locator() -> Locator:
    """Locator carrying every scored attribute"""
    return Locator({
        "tag": "button",
        "class": "btn btn-primary",
        "name": "submit",
        "id": "submit-btn",
        "href": "/checkout/submit",
        "alt": "Submit order",
        "xpath": "/html[1]/body[1]/div[2]/button[1]",
        "idxpath": "//*[@id='main']/button[1]",
        "is_button": "yes",
        "x": "320",
        "y": "480",
        "area": "4800",
        "shape": "300",
        "visible_text": "Submit",
        "neighbor_text": "Review your order before you submit",
    })


# ==================== Matcher Fixtures ====================

@pytest.fixture
def config() -> SimiloConfig:
    return SimiloConfig()


@pytest.fixture
def matcher(config) -> DynamicWeightMatcher:
    return DynamicWeightMatcher(config)


@pytest.fixture
def weights_file(tmp_path) -> Path:
    return tmp_path / "similo" / "weights.properties"


# ==================== Mock Page Fixture ====================

@pytest.fixture
def raw_elements() -> list:
    """Element data in the shape returned by the extraction script"""
    return [
        {
            "tagName": "BUTTON",
            "attributes": {"id": "login-btn", "class": "btn primary", "type": "submit"},
            "textContent": "Log in",
            "boundingBox": {"x": 100.4, "y": 200.6, "width": 120, "height": 40},
            "xpath": "/html[1]/body[1]/form[1]/button[1]",
            "idxpath": "//*[@id='login-btn']",
            "neighborText": "Forgot password? Log in",
        },
        {
            "tagName": "INPUT",
            "attributes": {"name": "email", "type": "email"},
            "textContent": "",
            "boundingBox": {"x": 100, "y": 120, "width": 240, "height": 0},
            "xpath": "/html[1]/body[1]/form[1]/input[1]",
            "idxpath": "//*[@id='login']/input[1]",
            "neighborText": "",
        },
    ]


@pytest.fixture
def mock_page(raw_elements):
    """Create a mock Playwright page object."""
    page = AsyncMock()
    page.url = "https://example.com/login"
    page.evaluate = AsyncMock(return_value=raw_elements)
    page.goto = AsyncMock(return_value=None)
    page.title = AsyncMock(return_value="Login")
    page.locator = Mock()
    return page
