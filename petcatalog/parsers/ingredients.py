"""
Ingredient-Text Extractor.
Locates the ingredient statement in one of several page layouts and turns it
into clean text and ingredient tokens.
"""
import re
from functools import partial
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from petcatalog.adapters.html_document import element_text
from petcatalog.config import config
from petcatalog.models.product import ParsedIngredient
from petcatalog.parsers.strategies import Strategy, first_success
from petcatalog.utils.logger import ParserLogger
from petcatalog.utils.text import decode_entities, normalize_whitespace

NIC_CONTENT_ID = "nic-ingredients-content"
CONTENT_SECTION_SELECTOR = '.a-section.content, .content, div[class*="content"]'
EXPANDER_SELECTOR = "[data-expanded] .a-expander-content, .a-expander-section-content, .a-expander-content"
HEADING_TAGS = ["h2", "h3", "h4", "h5"]
BLOCK_TAGS = ["div", "section", "article", "p", "li", "td", "dd"]
PRIMARY_INGREDIENT_COUNT = 5

# A statement continues onto the next line only when the line ends with a comma.
_SUFFIX_PATTERN = re.compile(r"ingredients:\s*((?:[^\n]*,[ \t]*\n)*[^\n]+)", re.IGNORECASE)
_PERCENTAGE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*%")


def text_after_label(text: str) -> str:
    """Everything after the first "ingredients:", including comma-wrapped lines."""
    match = _SUFFIX_PATTERN.search(text or "")
    return normalize_whitespace(match.group(1)) if match else ""


def _raw_text(element: Optional[Tag]) -> str:
    return element.get_text(" ") if element is not None else ""


def _following_text(label: Tag) -> str:
    """Text of everything after a label element inside its parent."""
    parts = []
    for sibling in label.next_siblings:
        if isinstance(sibling, Comment):
            continue
        if isinstance(sibling, NavigableString):
            parts.append(str(sibling))
        elif isinstance(sibling, Tag):
            parts.append(sibling.get_text(" "))
    return normalize_whitespace(" ".join(parts))


def _shortest(candidates: Iterable[Tuple[int, str]]) -> str:
    candidates = list(candidates)
    if not candidates:
        return ""
    return min(candidates, key=lambda candidate: candidate[0])[1]


def from_nic_content(document: BeautifulSoup) -> str:
    """Dedicated ingredients panel, by id."""
    panel = document.find(id=NIC_CONTENT_ID)
    if panel is None:
        return ""
    span = panel.find("span")
    return element_text(span) or element_text(panel)


def from_content_section(document: BeautifulSoup) -> str:
    """Content section headed "Ingredients", followed by a paragraph."""
    for section in document.select(CONTENT_SECTION_SELECTOR):
        heading = section.find(HEADING_TAGS)
        if heading is None or "ingredients" not in element_text(heading).lower():
            continue
        paragraph = section.find("p")
        text = element_text(paragraph)
        if text:
            return text
    return ""


def from_expander(document: BeautifulSoup) -> str:
    """Expander block mentioning ingredients; keep the part after "Ingredients:"."""
    for block in document.select(EXPANDER_SELECTOR):
        raw = _raw_text(block)
        if "ingredients" not in raw.lower():
            continue
        text = text_after_label(raw)
        if text:
            return text
    return ""


def from_inline_span(document: BeautifulSoup) -> str:
    """
    Inline span reading "Ingredients: ...", or a bold "Ingredients:" label
    span followed by the list, as a sibling span or as plain text.
    """
    for span in document.find_all("span"):
        raw = _raw_text(span)
        if "ingredients:" not in raw.lower():
            continue
        text = text_after_label(raw)
        if not text:
            text = element_text(span.find_next_sibling("span")) or _following_text(span)
        if text:
            return text
    return ""


def from_text_block(document: BeautifulSoup, min_length: int = 50) -> str:
    """
    Any block element mentioning ingredients with enough text to be a real
    statement. The most specific (shortest) qualifying block wins.
    """
    candidates: List[Tuple[int, str]] = []
    for block in document.find_all(BLOCK_TAGS):
        raw = _raw_text(block)
        cleaned = normalize_whitespace(raw)
        if "ingredients" not in cleaned.lower() or len(cleaned) <= min_length:
            continue

        text = text_after_label(raw)
        if not text:
            heading = block.find(HEADING_TAGS)
            if heading is not None and "ingredients" in element_text(heading).lower():
                text = element_text(block.find("p"))
        if text:
            candidates.append((len(cleaned), text))

    return _shortest(candidates)


def from_labelled_element(document: BeautifulSoup, min_length: int = 100) -> str:
    """Last resort: any element holding "Ingredients:" and a long statement."""
    candidates: List[Tuple[int, str]] = []
    for element in document.find_all(True):
        raw = _raw_text(element)
        if "ingredients:" not in raw.lower():
            continue
        cleaned = normalize_whitespace(raw)
        if len(cleaned) <= min_length:
            continue
        text = text_after_label(raw)
        if text:
            candidates.append((len(cleaned), text))

    return _shortest(candidates)


def clean_ingredient_text(text: str) -> str:
    """Decode leftover entities and collapse whitespace."""
    return normalize_whitespace(decode_entities(text))


def split_ingredients(text: Optional[str]) -> List[str]:
    """Comma-separated ingredient names, trimmed, empties dropped."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def parse_ingredient_list(text: Optional[str]) -> List[ParsedIngredient]:
    """
    Structured ingredient records with list position and any stated
    percentage. The first five are the primary ingredients.
    """
    if not text or not text.strip():
        return []

    names = [part.strip() for part in re.split(r"[,;]", text) if part.strip()]
    parsed = []
    for index, name in enumerate(names):
        match = _PERCENTAGE_PATTERN.search(name)
        parsed.append(ParsedIngredient(
            name=name,
            position=index + 1,
            percentage=float(match.group(1)) if match else None,
            is_primary=index < PRIMARY_INGREDIENT_COUNT,
        ))
    return parsed


class IngredientExtractor:
    """Tries each ingredient location in order until one yields text."""

    def __init__(
        self,
        logger: Optional[ParserLogger] = None,
        min_block_length: Optional[int] = None,
        min_labelled_length: Optional[int] = None,
    ):
        self.logger = logger or ParserLogger("ingredient_extractor")
        self.min_block_length = (
            config.INGREDIENT_BLOCK_MIN_LENGTH if min_block_length is None else min_block_length
        )
        self.min_labelled_length = (
            config.INGREDIENT_LABELLED_MIN_LENGTH if min_labelled_length is None else min_labelled_length
        )
        self.strategies = (
            Strategy("nic_content", from_nic_content),
            Strategy("content_section", from_content_section),
            Strategy("expander", from_expander),
            Strategy("inline_span", from_inline_span),
            Strategy("text_block", partial(from_text_block, min_length=self.min_block_length)),
            Strategy("labelled_element", partial(from_labelled_element, min_length=self.min_labelled_length)),
        )

    def extract(self, document: BeautifulSoup) -> Optional[str]:
        match = first_success(self.strategies, document, self.logger, target="ingredients")
        if match is None:
            return None

        text = clean_ingredient_text(match.value)
        self.logger.log_action(
            "ingredient_extraction",
            "completed",
            strategy=match.strategy,
            preview=text[:100],
            length=len(text),
        )
        return text or None

    def split(self, text: Optional[str]) -> List[str]:
        return split_ingredients(text)
