"""
Product details, specifications, image and title extraction.
"""
import re
from typing import Dict, Iterator, Optional, Tuple

from bs4 import BeautifulSoup

from petcatalog.adapters.html_document import element_text
from petcatalog.models.product import ProductDetails, ProductSpecifications
from petcatalog.parsers.identifiers import DETAIL_TABLE_SELECTOR, identifier_type_for_label
from petcatalog.parsers.strategies import Strategy, first_success
from petcatalog.utils.logger import ParserLogger
from petcatalog.utils.text import strip_label

ATTRIBUTE_ROW_SELECTOR = 'tr.a-spacing-small.po-item_form, tr[class*="po-"]'
ATTRIBUTE_LABEL_SELECTOR = "span.a-size-base.a-text-bold"
ATTRIBUTE_VALUE_SELECTOR = "span.a-size-base.po-break-word"

# (label substring, target, field). Order matters: first matching rule wins.
# A None target drops the row (e.g. "Is Discontinued By Manufacturer").
LABEL_RULES: Tuple[Tuple[str, Optional[str], Optional[str]], ...] = (
    ("discontinued", None, None),
    ("item form", "details", "item_form"),
    ("brand name", "details", "brand_name"),
    ("flavor", "details", "flavor"),
    ("age range", "details", "age_range"),
    ("container type", "details", "container_type"),
    ("breed recommendation", "details", "breed_recommendation"),
    ("allergen information", "details", "allergen_info"),
    ("special ingredients", "details", "special_ingredients"),
    ("manufacturer", "details", "manufacturer"),
    ("specific uses for product", "details", "specific_uses"),
    ("occasion", "details", "occasion"),
    ("dog breed size", "details", "dog_breed_size"),
    ("animal food ingredient claim", "details", "animal_food_ingredient_claim"),
    ("animal food nutrient content claim", "details", "animal_food_nutrient_content_claim"),
    ("animal food diet type", "details", "animal_food_diet_type"),
    ("item type name", "details", "item_type_name"),
    ("item height", "specifications", "item_height"),
    ("item weight", "specifications", "item_weight"),
    ("dimensions", "specifications", "dimensions"),
)

IMAGE_SELECTORS: Tuple[str, ...] = (
    "#landingImage",
    ".imgTagWrapper img",
    "#imgTagWrapperId img",
    "img[data-old-hires]",
    "img.a-dynamic-image",
    "img[data-a-dynamic-image]",
    'img[src*="media-amazon.com"]',
)

# "._AC_SX679_." style size modifiers in image file names
_IMAGE_SIZE_PATTERN = re.compile(r"\._[^./]+_\.")


def match_label(label: str) -> Optional[Tuple[str, str]]:
    """Map a details label to (target, field), or None if unrecognised."""
    normalized = strip_label(label)
    for needle, target, field_name in LABEL_RULES:
        if needle in normalized:
            if target is None:
                return None
            return target, field_name
    return None


def iter_detail_rows(document: BeautifulSoup) -> Iterator[Tuple[str, str]]:
    """(label, value) pairs from the details table, then the attribute rows."""
    for table in document.select(DETAIL_TABLE_SELECTOR):
        for row in table.find_all("tr"):
            th, td = row.find("th"), row.find("td")
            if th is not None and td is not None:
                yield element_text(th), element_text(td)

    for row in document.select(ATTRIBUTE_ROW_SELECTOR):
        label = row.select_one(ATTRIBUTE_LABEL_SELECTOR)
        value = row.select_one(ATTRIBUTE_VALUE_SELECTOR)
        if label is not None and value is not None:
            yield element_text(label), element_text(value)


def fold_detail_rows(rows: Iterator[Tuple[str, str]]) -> Dict[str, Dict[str, str]]:
    """First value seen for each field wins; identifier rows are ignored."""
    found: Dict[str, Dict[str, str]] = {"details": {}, "specifications": {}}
    for label, value in rows:
        if not label or not value or identifier_type_for_label(label) is not None:
            continue
        target = match_label(label)
        if target is None:
            continue
        section, field_name = target
        found[section].setdefault(field_name, value)
    return found


def clean_image_url(url: str) -> str:
    """Drop marketplace size modifiers so the full-size image is referenced."""
    return _IMAGE_SIZE_PATTERN.sub(".", url.strip())


def _image_from(selector: str, document: BeautifulSoup) -> Optional[str]:
    image = document.select_one(selector)
    if image is None:
        return None
    src = image.get("data-old-hires") or image.get("src")
    if not src or src.startswith("data:"):
        return None
    return clean_image_url(src)


def extract_title(document: BeautifulSoup) -> Optional[str]:
    """Product title with stray quote characters removed."""
    title = element_text(document.find(id="productTitle")).replace('"', "")
    return title.strip() or None


class ProductDetailsExtractor:
    """Reads named details, specifications, the main image and the title."""

    def __init__(self, logger: Optional[ParserLogger] = None):
        self.logger = logger or ParserLogger("product_details_extractor")
        self.image_strategies = tuple(
            Strategy(selector, lambda document, selector=selector: _image_from(selector, document))
            for selector in IMAGE_SELECTORS
        )

    def extract_details(self, document: BeautifulSoup) -> Tuple[ProductDetails, ProductSpecifications]:
        found = fold_detail_rows(iter_detail_rows(document))
        details = ProductDetails(**found["details"])
        specifications = ProductSpecifications(**found["specifications"])

        self.logger.log_action(
            "details_extraction",
            "completed",
            details=sorted(found["details"]),
            specifications=sorted(found["specifications"]),
        )
        return details, specifications

    def extract_image_url(self, document: BeautifulSoup) -> Optional[str]:
        match = first_success(self.image_strategies, document, self.logger, target="image_url")
        return match.value if match else None

    def extract_title(self, document: BeautifulSoup) -> Optional[str]:
        return extract_title(document)
