"""Parsers package initialization."""
from petcatalog.parsers.identifiers import IdentifierExtractor
from petcatalog.parsers.options import OptionTaxonomyExtractor
from petcatalog.parsers.availability import AvailabilityParser
from petcatalog.parsers.ingredients import IngredientExtractor
from petcatalog.parsers.product_details import ProductDetailsExtractor

__all__ = [
    "IdentifierExtractor",
    "OptionTaxonomyExtractor",
    "AvailabilityParser",
    "IngredientExtractor",
    "ProductDetailsExtractor",
]
