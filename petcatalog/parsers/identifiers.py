"""
Identifier Extractor.
Finds UPC/ASIN/EAN (and GTIN/ISBN) codes in pasted product page HTML.
"""
import re
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from petcatalog.adapters.html_document import element_text
from petcatalog.models.catalog import Identifier, IdentifierType
from petcatalog.parsers.strategies import Strategy, collect_all
from petcatalog.utils.logger import ParserLogger
from petcatalog.utils.text import strip_label

DETAIL_TABLE_SELECTOR = "table.a-keyvalue.prodDetTable, table.prodDetTable"
BOLD_LABEL_SELECTOR = "li span.a-text-bold"

# Checked in order; "ean" last since it is the loosest substring.
LABEL_RULES: Tuple[Tuple[str, IdentifierType], ...] = (
    ("upc", IdentifierType.UPC),
    ("asin", IdentifierType.ASIN),
    ("gtin", IdentifierType.GTIN),
    ("isbn", IdentifierType.ISBN),
    ("ean", IdentifierType.EAN),
)

TEXT_PATTERNS: Tuple[Tuple[re.Pattern, IdentifierType], ...] = (
    (re.compile(r"ASIN:\s*([A-Z0-9]+)", re.IGNORECASE), IdentifierType.ASIN),
    (re.compile(r"UPC:\s*([0-9]+)", re.IGNORECASE), IdentifierType.UPC),
)


def identifier_type_for_label(label: str) -> Optional[IdentifierType]:
    """Map a details label ("UPC", "ASIN :", ...) to an identifier type."""
    normalized = strip_label(label)
    for needle, id_type in LABEL_RULES:
        if needle in normalized:
            return id_type
    return None


def split_codes(id_type: IdentifierType, value: str) -> Tuple[Identifier, ...]:
    """Multi-pack listings put several codes in one cell, space separated."""
    return tuple(
        Identifier(type=id_type, value=code)
        for code in value.split()
        if code.strip()
    )


def _labelled_identifiers(label: str, value: str) -> Tuple[Identifier, ...]:
    id_type = identifier_type_for_label(label)
    if id_type is None or not value:
        return ()
    return split_codes(id_type, value)


def from_details_table(document: BeautifulSoup) -> Tuple[Identifier, ...]:
    """Key/value product details table: <th>label</th><td>codes</td>."""
    found: Tuple[Identifier, ...] = ()
    for table in document.select(DETAIL_TABLE_SELECTOR):
        for row in table.find_all("tr"):
            th = row.find("th")
            td = row.find("td")
            if th is None or td is None:
                continue
            found += _labelled_identifiers(element_text(th), element_text(td))
    return found


def _value_span_for(label_span: Tag) -> Optional[Tag]:
    sibling = label_span.find_next_sibling("span")
    if sibling is not None:
        return sibling
    item = label_span.find_parent("li")
    if item is None:
        return None
    for span in item.select("span:not(.a-text-bold)"):
        # Skip wrappers that contain the label itself
        if label_span in span.descendants:
            continue
        return span
    return None


def from_bold_label_list(document: BeautifulSoup) -> Tuple[Identifier, ...]:
    """Detail bullets: <li><span class="a-text-bold">UPC :</span><span>codes</span></li>."""
    found: Tuple[Identifier, ...] = ()
    for label_span in document.select(BOLD_LABEL_SELECTOR):
        value_span = _value_span_for(label_span)
        if value_span is None:
            continue
        found += _labelled_identifiers(element_text(label_span), element_text(value_span))
    return found


def from_free_text(document: BeautifulSoup) -> Tuple[Identifier, ...]:
    """
    Last resort "ASIN: X" / "UPC: N" patterns anywhere in the page.

    Every element's text is a contiguous slice of the document text, so one
    scan of the whole text covers all elements.
    """
    text = document.get_text(" ")
    found: Tuple[Identifier, ...] = ()
    for pattern, id_type in TEXT_PATTERNS:
        for match in pattern.finditer(text):
            found += (Identifier(type=id_type, value=match.group(1)),)
    return found


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    Strategy("details_table", from_details_table),
    Strategy("bold_label_list", from_bold_label_list),
    Strategy("free_text", from_free_text),
)


def merge_identifiers(groups: Iterable[Iterable[Identifier]]) -> List[Identifier]:
    """Union identifier groups, keeping first-seen order and dropping duplicates."""
    seen = set()
    merged: List[Identifier] = []
    for group in groups:
        for identifier in group:
            if identifier in seen:
                continue
            seen.add(identifier)
            merged.append(identifier)
    return merged


class IdentifierExtractor:
    """
    Runs every identifier strategy and unions the results.

    No strategy overrides another; an empty result is not an error.
    """

    def __init__(self, logger: Optional[ParserLogger] = None, strategies=DEFAULT_STRATEGIES):
        self.logger = logger or ParserLogger("identifier_extractor")
        self.strategies = tuple(strategies)

    def extract(self, document: BeautifulSoup) -> List[Identifier]:
        results = collect_all(self.strategies, document, self.logger, target="identifiers")
        identifiers = merge_identifiers(found for _, found in results)

        self.logger.log_action(
            "identifier_extraction",
            "completed",
            count=len(identifiers),
            strategies_matched=[name for name, _ in results],
        )
        return identifiers
