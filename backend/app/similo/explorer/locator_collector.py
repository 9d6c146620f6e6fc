"""
Locator Collector

Turns the elements of a live page into Locators for the matcher. This is
the only part of the package that talks to a browser; the scoring engine
only ever sees the resulting attribute bags.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol

from playwright.async_api import async_playwright

from ..core.locator import Locator

logger = logging.getLogger(__name__)


INTERACTIVE_SELECTOR = (
    'a, button, input, select, textarea, img, label, li, tr, '
    '[role="button"], [role="link"], [onclick]'
)

MAX_CANDIDATES = 500

BUTTON_TYPES = ("button", "submit", "reset")

# Runs in the page; returns plain data for build_locator()
EXTRACT_SCRIPT = """
([selector, limit]) => {
    const xpathOf = (el) => {
        const parts = [];
        for (let node = el; node && node.nodeType === 1; node = node.parentNode) {
            let index = 1;
            for (let sib = node.previousElementSibling; sib; sib = sib.previousElementSibling) {
                if (sib.tagName === node.tagName) index++;
            }
            parts.unshift(node.tagName.toLowerCase() + '[' + index + ']');
        }
        return '/' + parts.join('/');
    };
    const idXpathOf = (el) => {
        const parts = [];
        for (let node = el; node && node.nodeType === 1; node = node.parentNode) {
            if (node.id) {
                parts.unshift("/*[@id='" + node.id + "']");
                return '/' + parts.join('/');
            }
            let index = 1;
            for (let sib = node.previousElementSibling; sib; sib = sib.previousElementSibling) {
                if (sib.tagName === node.tagName) index++;
            }
            parts.unshift(node.tagName.toLowerCase() + '[' + index + ']');
        }
        return '/' + parts.join('/');
    };
    const neighborText = (el) => {
        const parent = el.parentElement;
        if (!parent) return '';
        return (parent.innerText || '').replace(/\\s+/g, ' ').trim().substring(0, 200);
    };
    return Array.from(document.querySelectorAll(selector)).slice(0, limit).map(el => {
        const rect = el.getBoundingClientRect();
        return {
            tagName: el.tagName,
            attributes: Object.fromEntries(
                Array.from(el.attributes).map(a => [a.name, a.value])
            ),
            textContent: (el.innerText || el.value || '').trim().substring(0, 200),
            boundingBox: {
                x: rect.x, y: rect.y,
                width: rect.width, height: rect.height
            },
            xpath: xpathOf(el),
            idxpath: idXpathOf(el),
            neighborText: neighborText(el)
        };
    });
}
"""


class LocatorSource(Protocol):
    """Anything that can enumerate the current candidates for an identifier"""

    async def get_candidates(self, identifier: Optional[str] = None) -> List[Locator]:
        ...


def build_locator(raw: Dict[str, Any]) -> Locator:
    """
    Convert raw element data into a Locator.

    Args:
        raw: Element data as returned by EXTRACT_SCRIPT

    Returns:
        Locator with tag/class/name/id/href/alt, xpaths, geometry
        (x, y, width, height, area, shape), is_button and text attributes
    """
    attrs = raw.get("attributes") or {}
    tag = (raw.get("tagName") or "").lower()

    metadata: Dict[str, Any] = {"tag": tag}
    for key in ("class", "name", "id", "href", "alt"):
        if attrs.get(key):
            metadata[key] = attrs[key]

    if raw.get("xpath"):
        metadata["xpath"] = raw["xpath"]
    if raw.get("idxpath"):
        metadata["idxpath"] = raw["idxpath"]

    input_type = (attrs.get("type") or "").lower()
    is_button = (
        tag == "button"
        or (tag == "input" and input_type in BUTTON_TYPES)
        or (attrs.get("role") or "").lower() == "button"
    )
    metadata["is_button"] = "yes" if is_button else "no"

    box = raw.get("boundingBox") or {}
    if box:
        x = int(round(box.get("x", 0)))
        y = int(round(box.get("y", 0)))
        width = int(round(box.get("width", 0)))
        height = int(round(box.get("height", 0)))
        metadata.update({"x": x, "y": y, "width": width, "height": height})
        metadata["area"] = width * height
        if height > 0:
            metadata["shape"] = (width * 100) // height

    text = (raw.get("textContent") or "").strip()
    if text:
        metadata["visible_text"] = text
    neighbor = (raw.get("neighborText") or "").strip()
    if neighbor:
        metadata["neighbor_text"] = neighbor

    return Locator(metadata)


class PlaywrightLocatorCollector:
    """Collects candidate Locators from a Playwright page"""

    def __init__(self, page, max_candidates: int = MAX_CANDIDATES):
        """
        Args:
            page: Playwright page (async API)
            max_candidates: Cap on elements returned per call
        """
        self.page = page
        self.max_candidates = max_candidates

    async def get_candidates(self, identifier: Optional[str] = None) -> List[Locator]:
        """
        Enumerate candidate elements.

        Args:
            identifier: CSS selector scoping the candidates; defaults to
                all interactive elements
        """
        selector = identifier or INTERACTIVE_SELECTOR
        raw_elements = await self.page.evaluate(EXTRACT_SCRIPT, [selector, self.max_candidates])

        locators = []
        for raw in raw_elements or []:
            try:
                locators.append(build_locator(raw))
            except (TypeError, ValueError) as e:
                logger.debug(f"[SIMILO] Skipping malformed element data: {e}")

        logger.info(f"[SIMILO] Collected {len(locators)} candidates for '{selector}'")
        return locators


@asynccontextmanager
async def open_page(url: str, headless: bool = True) -> AsyncIterator[Any]:
    """Launch Chromium, open `url` and yield the page"""
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            await page.goto(url)
            await page.wait_for_load_state("domcontentloaded")
            yield page
        finally:
            await browser.close()
