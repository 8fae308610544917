"""Text normalisation helpers shared by the parsers and models."""
import re

# Marketplace labels are padded with directional marks around the colon.
_INVISIBLE_CHARS = re.compile("[\u200b\u200e\u200f\u202a-\u202e\ufeff]")
_WHITESPACE = re.compile(r"\s+")

HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def clean_text(text: str) -> str:
    """Strip invisible marks and non-breaking spaces, then collapse whitespace."""
    if not text:
        return ""
    text = _INVISIBLE_CHARS.sub("", text).replace("\xa0", " ")
    return normalize_whitespace(text)


def decode_entities(text: str) -> str:
    """Decode the standard HTML entities left over in pasted text."""
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def strip_label(text: str) -> str:
    """Turn a label like 'UPC :' into 'upc' for substring matching."""
    return clean_text(text).rstrip(":").strip().lower()
