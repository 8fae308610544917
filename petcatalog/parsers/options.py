"""
Option-Taxonomy Extractor.
Reads option dimensions (flavor, size, ...) and their values from the
marketplace's inline variant selector ("twister").
"""
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from petcatalog.adapters.html_document import element_text
from petcatalog.errors import StructuralParseError
from petcatalog.models.catalog import OptionDimension
from petcatalog.utils.logger import ParserLogger

TWISTER_ROOT_ID = "twister-plus-inline-twister"
ROW_ID_PREFIX = "inline-twister-row-"
ROW_SELECTOR = f'[id^="{ROW_ID_PREFIX}"]'
TITLE_SELECTOR = '[id^="inline-twister-dim-title-"]'
CAPTION_SELECTOR = ".a-color-secondary"
VALUE_SELECTORS: Tuple[str, ...] = (
    ".swatch-title-text-display, .swatch-title-text",
    '[class*="swatch"] [class*="text"]',
)


def find_twister_root(document: BeautifulSoup) -> Tag:
    """Locate the variant selector root or raise StructuralParseError."""
    root = document.find(id=TWISTER_ROOT_ID)
    if root is None:
        raise StructuralParseError(
            "Could not find the option selector container "
            f'(element with id "{TWISTER_ROOT_ID}"). Copy the complete twister section.',
            fragment=f"#{TWISTER_ROOT_ID}",
        )
    return root


def find_option_rows(root: Tag) -> List[Tag]:
    """One row per option dimension, identified by id prefix."""
    return root.select(ROW_SELECTOR)


def row_dimension_name(row: Tag) -> str:
    return row.get("id", "")[len(ROW_ID_PREFIX):]


def row_display_name(row: Tag, fallback: str) -> str:
    """Caption text of the row title, trailing colon removed."""
    title = row.select_one(TITLE_SELECTOR)
    if title is None:
        return fallback
    caption = element_text(title.select_one(CAPTION_SELECTOR))
    caption = caption.rstrip(":").strip()
    return caption or fallback


def collect_values(elements: List[Tag]) -> List[str]:
    """Cleaned, de-duplicated value texts in document order."""
    values: List[str] = []
    for element in elements:
        value = element_text(element)
        if value and value not in values:
            values.append(value)
    return values


class OptionTaxonomyExtractor:
    """
    Extracts OptionDimensions from the twister widget.

    Rows without any extractable value are dropped with a warning; the
    whole extraction fails only when the root is missing or nothing usable
    remains.
    """

    def __init__(self, logger: Optional[ParserLogger] = None):
        self.logger = logger or ParserLogger("option_taxonomy_extractor")

    def extract(self, document: BeautifulSoup) -> List[OptionDimension]:
        root = find_twister_root(document)
        rows = find_option_rows(root)
        if not rows:
            raise StructuralParseError(
                "No option rows found. Make sure the HTML contains the product options "
                f'(elements with id starting "{ROW_ID_PREFIX}").',
                fragment=ROW_SELECTOR,
            )

        dimensions: List[OptionDimension] = []
        for row in rows:
            dimension = self._extract_row(row, seen=[d.name for d in dimensions])
            if dimension is not None:
                dimensions.append(dimension)

        if not dimensions:
            raise StructuralParseError(
                "No valid options found. Check that the HTML contains product options with values.",
                fragment=VALUE_SELECTORS[0],
            )

        self.logger.log_action(
            "option_extraction",
            "completed",
            dimensions=[d.name for d in dimensions],
            value_count=sum(len(d.values) for d in dimensions),
        )
        return dimensions

    def _extract_row(self, row: Tag, seen: List[str]) -> Optional[OptionDimension]:
        name = row_dimension_name(row)
        if not name:
            self.logger.log_skip(item=row.get("id", ""), reason="empty_dimension_name")
            return None
        if name in seen:
            self.logger.log_skip(item=name, reason="duplicate_dimension_row")
            return None

        values = self._extract_values(row, name)
        if not values:
            self.logger.log_skip(item=name, reason="no_values_found")
            return None

        return OptionDimension(
            name=name,
            display_name=row_display_name(row, fallback=name),
            values=values,
        )

    def _extract_values(self, row: Tag, name: str) -> List[str]:
        primary, *fallbacks = VALUE_SELECTORS
        values = collect_values(row.select(primary))
        if values:
            return values

        for selector in fallbacks:
            self.logger.log_fallback(
                from_source=primary,
                to_source=selector,
                reason="primary value selector matched nothing",
                dimension=name,
            )
            values = collect_values(row.select(selector))
            if values:
                return values
        return values
