"""
Field-Confidence Scorer.

Scores are completeness ratios: how many of the fields we expect to find
in a category were actually populated, scaled to 0-100 and capped. They
tell the operator which sections of an extraction need a closer look and
are not probabilities.
"""
from typing import Dict, List, Optional

from petcatalog.models.catalog import Identifier
from petcatalog.models.product import (
    ConfidenceScores,
    ExtractedProductAttributes,
    ProductDetails,
    ProductSpecifications,
)

# Expected number of populated fields per category
EXPECTED_COUNTS: Dict[str, int] = {
    "identifiers": 3,
    "product_details": 15,
    "ingredients": 5,  # a nominal "good list" baseline
    "image": 1,
    "specifications": 3,
}


def completeness(found: int, expected: int) -> float:
    """min(100, found / expected * 100), never negative."""
    if expected <= 0:
        return 0.0
    return max(0.0, min(100.0, found / expected * 100))


class ConfidenceScorer:
    """Computes per-category completeness scores."""

    def __init__(self, expected_counts: Optional[Dict[str, int]] = None):
        self.expected_counts = {**EXPECTED_COUNTS, **(expected_counts or {})}

    def score_fields(
        self,
        identifiers: List[Identifier],
        product_details: ProductDetails,
        ingredients: List[str],
        image_url: Optional[str],
        specifications: ProductSpecifications,
    ) -> ConfidenceScores:
        counts = {
            "identifiers": len(identifiers),
            "product_details": len(product_details.populated()),
            "ingredients": len(ingredients),
            "image": 1 if image_url else 0,
            "specifications": len(specifications.populated()),
        }
        return ConfidenceScores(**{
            category: completeness(found, self.expected_counts[category])
            for category, found in counts.items()
        })

    def score(self, extracted: ExtractedProductAttributes) -> ConfidenceScores:
        return self.score_fields(
            identifiers=extracted.identifiers,
            product_details=extracted.product_details,
            ingredients=extracted.ingredients,
            image_url=extracted.image_url,
            specifications=extracted.specifications,
        )
