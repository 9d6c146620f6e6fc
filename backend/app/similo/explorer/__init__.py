"""
Page Exploration

Collects candidate Locators from a live browser page.
"""

from .locator_collector import LocatorSource, PlaywrightLocatorCollector, build_locator, open_page

__all__ = [
    "LocatorSource",
    "PlaywrightLocatorCollector",
    "build_locator",
    "open_page",
]
