"""
HTML Document Loader.
Wraps pasted marketplace HTML in a queryable BeautifulSoup tree.
"""
from typing import Optional

from bs4 import BeautifulSoup, Tag

from petcatalog.errors import StructuralParseError
from petcatalog.utils.text import clean_text


def load_document(html: str) -> BeautifulSoup:
    """
    Parse an HTML fragment or full page.

    Args:
        html: Raw markup as pasted by the operator

    Returns:
        BeautifulSoup document (lxml tree builder)

    Raises:
        StructuralParseError: If the input is empty
    """
    if not html or not html.strip():
        raise StructuralParseError("No HTML provided. Paste the marketplace HTML to parse.")
    return BeautifulSoup(html, "lxml")


def element_text(element: Optional[Tag]) -> str:
    """Cleaned text content of an element, or an empty string."""
    if element is None:
        return ""
    return clean_text(element.get_text(" "))
