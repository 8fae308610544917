"""
Extraction Layer for the Pet Catalog extraction service.
Runs every extractor over one pasted document and assembles the results.
"""
from typing import List, Optional

from petcatalog.adapters.html_document import load_document
from petcatalog.layers.confidence import ConfidenceScorer
from petcatalog.models.catalog import AvailabilityMap, OptionDimension
from petcatalog.models.product import ExtractedProductAttributes
from petcatalog.parsers.availability import AvailabilityParser
from petcatalog.parsers.identifiers import IdentifierExtractor
from petcatalog.parsers.ingredients import IngredientExtractor, split_ingredients
from petcatalog.parsers.options import OptionTaxonomyExtractor
from petcatalog.parsers.product_details import ProductDetailsExtractor
from petcatalog.utils.logger import ParserLogger


def merge_ingredient_lists(primary: List[str], extra: List[str]) -> List[str]:
    """Append extra ingredients that are not already listed."""
    merged = list(primary)
    for ingredient in extra:
        if ingredient not in merged:
            merged.append(ingredient)
    return merged


class ExtractionLayer:
    """
    Extraction Layer - source HTML in, plain data out.

    This layer:
    - Loads the pasted HTML once per call
    - Runs the independent extractors over the same document
    - Scores the result so the operator knows what to double-check

    Nothing is written anywhere; persistence happens only on an explicit
    commit through the reconciler.
    """

    def __init__(
        self,
        identifier_extractor: Optional[IdentifierExtractor] = None,
        details_extractor: Optional[ProductDetailsExtractor] = None,
        ingredient_extractor: Optional[IngredientExtractor] = None,
        option_extractor: Optional[OptionTaxonomyExtractor] = None,
        availability_parser: Optional[AvailabilityParser] = None,
        scorer: Optional[ConfidenceScorer] = None,
    ):
        self.logger = ParserLogger("extraction_layer")
        self.identifier_extractor = identifier_extractor or IdentifierExtractor()
        self.details_extractor = details_extractor or ProductDetailsExtractor()
        self.ingredient_extractor = ingredient_extractor or IngredientExtractor()
        self.option_extractor = option_extractor or OptionTaxonomyExtractor()
        self.availability_parser = availability_parser or AvailabilityParser()
        self.scorer = scorer or ConfidenceScorer()

    def extract_attributes(self, html: str) -> ExtractedProductAttributes:
        """
        Extract identifiers, details, ingredients, image and specifications.

        Args:
            html: Product page HTML pasted by the operator

        Returns:
            ExtractedProductAttributes with confidence scores
        """
        self.logger.log_action("attribute_extraction", "started", html_length=len(html or ""))
        document = load_document(html)

        identifiers = self.identifier_extractor.extract(document)
        details, specifications = self.details_extractor.extract_details(document)
        ingredients_text = self.ingredient_extractor.extract(document)
        image_url = self.details_extractor.extract_image_url(document)
        title = self.details_extractor.extract_title(document)

        ingredients = merge_ingredient_lists(
            split_ingredients(ingredients_text),
            split_ingredients(details.special_ingredients),
        )

        confidence = self.scorer.score_fields(
            identifiers=identifiers,
            product_details=details,
            ingredients=ingredients,
            image_url=image_url,
            specifications=specifications,
        )

        extracted = ExtractedProductAttributes(
            identifiers=identifiers,
            product_details=details,
            ingredients=ingredients,
            ingredients_text=ingredients_text,
            image_url=image_url,
            specifications=specifications,
            title=title,
            confidence=confidence,
        )

        self.logger.log_extraction(
            fields_present=extracted.get_present_fields(),
            fields_missing=extracted.get_missing_fields(),
            confidence=confidence.to_dict(),
        )
        return extracted

    def extract_options(self, html: str) -> List[OptionDimension]:
        """Option dimensions from a pasted twister section."""
        self.logger.log_action("option_extraction", "started", html_length=len(html or ""))
        return self.option_extractor.extract(load_document(html))

    def parse_availability(self, html: str, primary_dimension_name: str) -> AvailabilityMap:
        """Availability map from a twister snapshot of one selected combination."""
        self.logger.log_action(
            "availability_parse",
            "started",
            html_length=len(html or ""),
            primary_dimension=primary_dimension_name,
        )
        return self.availability_parser.parse_availability(load_document(html), primary_dimension_name)
