"""
Product attribute models produced by one parse of a marketplace product page.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from petcatalog.models.catalog import Identifier


class ProductDetails(BaseModel):
    """Named attributes read from the product details tables."""
    item_form: Optional[str] = None
    brand_name: Optional[str] = None
    flavor: Optional[str] = None
    age_range: Optional[str] = None
    container_type: Optional[str] = None
    breed_recommendation: Optional[str] = None
    allergen_info: Optional[str] = None
    special_ingredients: Optional[str] = None
    manufacturer: Optional[str] = None
    specific_uses: Optional[str] = None
    occasion: Optional[str] = None
    dog_breed_size: Optional[str] = None
    animal_food_ingredient_claim: Optional[str] = None
    animal_food_nutrient_content_claim: Optional[str] = None
    animal_food_diet_type: Optional[str] = None
    item_type_name: Optional[str] = None

    def populated(self) -> Dict[str, str]:
        """Return only the fields that were found."""
        return {k: v for k, v in self.model_dump().items() if v}


class ProductSpecifications(BaseModel):
    """Physical specifications read from the product details tables."""
    item_height: Optional[str] = None
    item_weight: Optional[str] = None
    dimensions: Optional[str] = None

    def populated(self) -> Dict[str, str]:
        """Return only the fields that were found."""
        return {k: v for k, v in self.model_dump().items() if v}


class ConfidenceScores(BaseModel):
    """
    Per-category completeness scores, 0-100.

    These measure how many of the expected fields were populated. They are
    a heuristic completeness signal for the operator and are not
    probabilities.
    """
    identifiers: float = Field(ge=0.0, le=100.0, default=0.0)
    product_details: float = Field(ge=0.0, le=100.0, default=0.0)
    ingredients: float = Field(ge=0.0, le=100.0, default=0.0)
    image: float = Field(ge=0.0, le=100.0, default=0.0)
    specifications: float = Field(ge=0.0, le=100.0, default=0.0)

    def to_dict(self) -> Dict[str, float]:
        """Return scores as a category -> score mapping."""
        return self.model_dump()


class ParsedIngredient(BaseModel):
    """One ingredient from a comma/semicolon separated statement."""
    name: str
    position: int = Field(ge=1)
    percentage: Optional[float] = None
    is_primary: bool = False


class ExtractedProductAttributes(BaseModel):
    """
    Everything extracted from one pasted product page.

    Created once per parse; re-parsing produces a new instance.
    """
    model_config = ConfigDict(frozen=True)

    identifiers: List[Identifier] = Field(default_factory=list)
    product_details: ProductDetails = Field(default_factory=ProductDetails)
    ingredients: List[str] = Field(default_factory=list)
    ingredients_text: Optional[str] = None
    image_url: Optional[str] = None
    specifications: ProductSpecifications = Field(default_factory=ProductSpecifications)
    title: Optional[str] = None
    confidence: ConfidenceScores = Field(default_factory=ConfidenceScores)

    def get_present_fields(self) -> List[str]:
        """Return list of non-empty top-level fields."""
        present = []
        if self.identifiers:
            present.append("identifiers")
        if self.product_details.populated():
            present.append("product_details")
        if self.ingredients:
            present.append("ingredients")
        if self.image_url:
            present.append("image_url")
        if self.specifications.populated():
            present.append("specifications")
        if self.title:
            present.append("title")
        return present

    def get_missing_fields(self) -> List[str]:
        """Return list of empty top-level fields."""
        all_fields = [
            "identifiers", "product_details", "ingredients",
            "image_url", "specifications", "title",
        ]
        present = self.get_present_fields()
        return [f for f in all_fields if f not in present]
