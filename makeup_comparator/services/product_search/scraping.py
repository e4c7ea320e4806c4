"""CSS selector helpers over BeautifulSoup documents."""

from __future__ import annotations

from typing import Union

from bs4 import BeautifulSoup, Tag

Element = Union[BeautifulSoup, Tag]


class HtmlSearchError(LookupError):
    """Raised when a selector or attribute is missing from the markup."""


class ElementNotFound(HtmlSearchError):
    def __init__(self, selector: str) -> None:
        super().__init__(f'selector: "{selector}" not found.')
        self.selector = selector


class AttributeNotFound(HtmlSearchError):
    def __init__(self, attribute: str) -> None:
        super().__init__(f'attribute: "{attribute}" not found.')
        self.attribute = attribute


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def select_element(element: Element, selector: str) -> Tag:
    """Return the first match for ``selector`` or raise ElementNotFound."""
    found = element.select_one(selector)
    if found is None:
        raise ElementNotFound(selector)
    return found


def inner_text(element: Element, selector: str) -> str:
    """Return the text inside the first match, whitespace collapsed."""
    return select_element(element, selector).get_text(" ", strip=True)


def attribute_value(element: Element, selector: str, attribute: str) -> str:
    """Return ``attribute`` of the first match for ``selector``."""
    found = select_element(element, selector)
    value = found.get(attribute)
    if value is None:
        raise AttributeNotFound(attribute)
    if isinstance(value, list):
        # Multi-valued attributes such as ``class``.
        return " ".join(value)
    return value


def has_selector(element: Element, selector: str) -> bool:
    return element.select_one(selector) is not None
