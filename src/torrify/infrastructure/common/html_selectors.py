"""CSS-selector-based HTML extraction with fallback chains.

Every extraction function accepts a primary selector and optional
*fallback_selectors*; the first selector that yields at least one match
wins. This keeps adapters working across mirrors whose markup differs by
an extra wrapper ``<div>`` or a renamed CSS class.
"""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain.

    Returns results from the **first** selector that matches at least one
    element.
    """
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_text(
    element: Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
    strip: bool = True,
) -> str:
    """Extract text from the first matching child element.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        text = element.get_text(strip=strip)
        return text if text else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            text = match.get_text(strip=strip)
            if text:
                return text
    return default


def extract_attr(
    element: Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Extract an HTML attribute from the first matching child element.

    With ``selector=""`` the attribute is read from *element* itself.
    """
    if selector == "":
        val = element.get(attr)
        return str(val) if val else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            val = match.get(attr)
            if val:
                return str(val)
    return default


def absolute_url(base_url: str, href: str) -> str:
    if not href:
        return ""
    return urljoin(base_url + "/", href)
