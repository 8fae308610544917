"""
Catalog taxonomy models: option dimensions, identifiers, variant
combinations and the reconciliation results that link them to the store.
"""
from typing import Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from petcatalog.utils.text import normalize_whitespace


# "{dimension}:{value}" -> available
AvailabilityMap = Dict[str, bool]


def availability_key(dimension_name: str, value: str) -> str:
    """Build the AvailabilityMap key for one dimension value."""
    return f"{dimension_name}:{value}"


class IdentifierType(str, Enum):
    """Product identifier kinds recognised in marketplace HTML."""
    UPC = "UPC"
    ASIN = "ASIN"
    EAN = "EAN"
    GTIN = "GTIN"
    ISBN = "ISBN"
    SKU = "SKU"


class Identifier(BaseModel):
    """A (type, value) product identifier. Hashable, so sets deduplicate it."""
    model_config = ConfigDict(frozen=True)

    type: IdentifierType
    value: str

    @field_validator("value")
    @classmethod
    def _strip_value(cls, value: str) -> str:
        return value.strip()


class OptionDimension(BaseModel):
    """
    One axis of product variation, e.g. flavor or size.

    Values are normalised on construction: whitespace collapsed, empty
    entries dropped and duplicates removed, keeping first-seen order.
    """
    name: str
    display_name: str = ""
    values: List[str] = Field(default_factory=list)

    @field_validator("values")
    @classmethod
    def _dedupe_values(cls, values: List[str]) -> List[str]:
        seen: List[str] = []
        for value in values:
            cleaned = normalize_whitespace(value)
            if cleaned and cleaned not in seen:
                seen.append(cleaned)
        return seen

    @model_validator(mode="after")
    def _default_display_name(self) -> "OptionDimension":
        if not self.display_name:
            self.display_name = self.name
        return self


class VariantCombination(BaseModel):
    """One candidate variant: a chosen value for every dimension."""
    model_config = ConfigDict(frozen=True)

    id: str
    values: Dict[str, str]
    display_name: str
    title: str = ""


class StoredDimension(BaseModel):
    """An option type as it currently exists in the catalog store."""
    id: int
    name: str
    display_name: str
    values: List[str] = Field(default_factory=list)


class ReconciliationConflict(BaseModel):
    """Extracted display name disagrees with the stored one; stored wins."""
    dimension_name: str
    extracted_display_name: str
    stored_display_name: str


class OptionAnalysis(BaseModel):
    """Known vs new split of one extracted dimension against the catalog."""
    dimension: OptionDimension
    is_new_dimension: bool
    new_values: List[str] = Field(default_factory=list)
    existing_values: List[str] = Field(default_factory=list)
    stored_display_name: Optional[str] = None
    conflict: Optional[ReconciliationConflict] = None

    @property
    def has_changes(self) -> bool:
        return self.is_new_dimension or bool(self.new_values)


class CommitSummary(BaseModel):
    """Counts of what a commit actually wrote."""
    new_dimensions: int = 0
    new_values: int = 0
    reused_dimensions: int = 0

    def describe(self) -> str:
        """Human-readable summary for the operator."""
        parts = []
        if self.new_dimensions:
            parts.append(f"{self.new_dimensions} new option type{'s' if self.new_dimensions != 1 else ''}")
        if self.new_values:
            parts.append(f"{self.new_values} new value{'s' if self.new_values != 1 else ''}")
        if self.reused_dimensions:
            parts.append(
                f"{self.reused_dimensions} existing option{'s' if self.reused_dimensions != 1 else ''} reused"
            )
        return ", ".join(parts) if parts else "nothing to save"
