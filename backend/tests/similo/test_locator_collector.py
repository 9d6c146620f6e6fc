"""
Tests for the Playwright locator collector.

Uses a mocked page; no browser is launched.
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "app"))

from similo.explorer.locator_collector import (
    EXTRACT_SCRIPT,
    INTERACTIVE_SELECTOR,
    PlaywrightLocatorCollector,
    build_locator,
)


class TestBuildLocator:
    """Test conversion of raw element data."""

    def test_button(self, raw_elements):
        locator = build_locator(raw_elements[0])

        assert locator["tag"] == "button"
        assert locator["id"] == "login-btn"
        assert locator["class"] == "btn primary"
        assert locator["is_button"] == "yes"
        assert locator["visible_text"] == "Log in"
        assert locator["neighbor_text"] == "Forgot password? Log in"
        assert locator["xpath"] == "/html[1]/body[1]/form[1]/button[1]"

    def test_geometry(self, raw_elements):
        locator = build_locator(raw_elements[0])

        assert locator["x"] == "100"
        assert locator["y"] == "201"
        assert locator["location"] == "100,201"
        assert locator["area"] == "4800"
        assert locator["shape"] == "300"

    def test_zero_height_has_no_shape(self, raw_elements):
        locator = build_locator(raw_elements[1])

        assert locator["area"] == "0"
        assert "shape" not in locator

    def test_empty_text_is_absent(self, raw_elements):
        locator = build_locator(raw_elements[1])

        assert "visible_text" not in locator
        assert "neighbor_text" not in locator
        assert "id" not in locator
        assert locator["name"] == "email"
        assert locator["is_button"] == "no"

    @pytest.mark.parametrize("tag,attributes,expected", [
        ("INPUT", {"type": "submit"}, "yes"),
        ("INPUT", {"type": "text"}, "no"),
        ("DIV", {"role": "button"}, "yes"),
        ("A", {"href": "/home"}, "no"),
    ])
    def test_is_button(self, tag, attributes, expected):
        locator = build_locator({"tagName": tag, "attributes": attributes})

        assert locator["is_button"] == expected

    def test_minimal_element(self):
        locator = build_locator({"tagName": "SPAN"})

        assert locator.scored_attributes() == ["tag", "is_button"]


class TestPlaywrightLocatorCollector:
    """Test candidate enumeration against a mocked page."""

    @pytest.mark.asyncio
    async def test_get_candidates(self, mock_page):
        collector = PlaywrightLocatorCollector(mock_page)

        candidates = await collector.get_candidates()

        assert len(candidates) == 2
        assert candidates[0]["id"] == "login-btn"
        mock_page.evaluate.assert_awaited_once_with(EXTRACT_SCRIPT, [INTERACTIVE_SELECTOR, 500])

    @pytest.mark.asyncio
    async def test_identifier_scopes_selector(self, mock_page):
        collector = PlaywrightLocatorCollector(mock_page, max_candidates=10)

        await collector.get_candidates("form button")

        mock_page.evaluate.assert_awaited_once_with(EXTRACT_SCRIPT, ["form button", 10])

    @pytest.mark.asyncio
    async def test_no_elements(self, mock_page):
        mock_page.evaluate.return_value = []
        collector = PlaywrightLocatorCollector(mock_page)

        assert await collector.get_candidates() == []

    @pytest.mark.asyncio
    async def test_malformed_element_skipped(self, mock_page, raw_elements):
        mock_page.evaluate.return_value = [
            {"tagName": "BUTTON", "boundingBox": {"x": "left", "y": 0}},
            raw_elements[0],
        ]
        collector = PlaywrightLocatorCollector(mock_page)

        candidates = await collector.get_candidates()

        assert len(candidates) == 1
        assert candidates[0]["id"] == "login-btn"

    @pytest.mark.asyncio
    async def test_candidates_feed_matcher(self, mock_page, matcher, raw_elements):
        collector = PlaywrightLocatorCollector(mock_page)
        target = build_locator(raw_elements[0])

        ranked = matcher.rank_candidates(target, await collector.get_candidates())

        assert ranked[0][0]["id"] == "login-btn"
