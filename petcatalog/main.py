"""
Pet Catalog Extraction Service - FastAPI Application
Main entry point with REST API endpoints.
"""
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from petcatalog import __version__
from petcatalog.adapters.catalog_store import CatalogStore, create_catalog_store
from petcatalog.config import config
from petcatalog.errors import CatalogStoreError, StructuralParseError
from petcatalog.generators.combination_generator import CombinationGenerator, group_combinations
from petcatalog.layers.extraction import ExtractionLayer
from petcatalog.layers.reconciliation import OptionReconciler
from petcatalog.models.catalog import (
    AvailabilityMap,
    CommitSummary,
    OptionAnalysis,
    OptionDimension,
    VariantCombination,
)
from petcatalog.models.product import ExtractedProductAttributes, ParsedIngredient
from petcatalog.parsers.ingredients import parse_ingredient_list
from petcatalog.utils.logger import get_logger, set_trace_id


# Initialize FastAPI app
app = FastAPI(
    title="Pet Catalog Extraction Service",
    description="Extracts product identifiers, options, availability and ingredients from pasted marketplace HTML",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize layers
extraction_layer = ExtractionLayer()
combination_generator = CombinationGenerator()

logger = get_logger("main")


def get_catalog_store() -> CatalogStore:
    """Catalog store dependency; overridden in tests."""
    try:
        return create_catalog_store()
    except CatalogStoreError as e:
        logger.error("catalog_store_unavailable", error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


# Request/Response models
class HtmlRequest(BaseModel):
    """Pasted HTML to parse."""
    html: str


class OptionsResponse(BaseModel):
    dimensions: List[OptionDimension]
    trace_id: str


class DimensionsRequest(BaseModel):
    dimensions: List[OptionDimension]


class AnalyzeResponse(BaseModel):
    analyses: List[OptionAnalysis]
    trace_id: str


class CommitResponse(BaseModel):
    summary: CommitSummary
    message: str
    trace_id: str


class AvailabilityParseRequest(BaseModel):
    html: str
    primary_dimension: str


class AvailabilityParseResponse(BaseModel):
    availability: AvailabilityMap
    trace_id: str


class AvailabilityApplyRequest(BaseModel):
    """Availability map plus the operator's current selection."""
    availability: AvailabilityMap
    dimensions: List[OptionDimension]
    group_name: str
    primary_dimension: Optional[str] = None  # defaults to the first dimension
    selected: List[str] = Field(default_factory=list)
    selected_values: Optional[Dict[str, List[str]]] = None
    permissive_secondary: Optional[bool] = None


class AvailabilityApplyResponse(BaseModel):
    selected: List[str]
    trace_id: str


class GenerateRequest(BaseModel):
    dimensions: List[OptionDimension]
    selected_values: Optional[Dict[str, List[str]]] = None


class GenerateResponse(BaseModel):
    combinations: List[VariantCombination]
    groups: Dict[str, List[str]]
    trace_id: str


class IngredientsRequest(BaseModel):
    text: str


class IngredientsResponse(BaseModel):
    ingredients: List[ParsedIngredient]
    trace_id: str


def _parse_error(e: StructuralParseError, event: str) -> HTTPException:
    logger.error(event, error=str(e), fragment=e.fragment)
    return HTTPException(status_code=422, detail=str(e))


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "catalog_backend": config.CATALOG_BACKEND,
    }


@app.post("/api/parse/attributes", response_model=ExtractedProductAttributes)
async def parse_attributes(request: HtmlRequest):
    """Extract identifiers, details, ingredients, image and specifications."""
    trace_id = set_trace_id()
    logger.info("attribute_parse_request", html_length=len(request.html), trace_id=trace_id)

    try:
        return extraction_layer.extract_attributes(request.html)
    except StructuralParseError as e:
        raise _parse_error(e, "attribute_parse_error")
    except Exception as e:
        logger.error("attribute_parse_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/parse/options", response_model=OptionsResponse)
async def parse_options(request: HtmlRequest):
    """Extract option dimensions from the twister section."""
    trace_id = set_trace_id()
    logger.info("option_parse_request", html_length=len(request.html), trace_id=trace_id)

    try:
        dimensions = extraction_layer.extract_options(request.html)
        return OptionsResponse(dimensions=dimensions, trace_id=trace_id)
    except StructuralParseError as e:
        raise _parse_error(e, "option_parse_error")
    except Exception as e:
        logger.error("option_parse_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/options/analyze", response_model=AnalyzeResponse)
async def analyze_options(request: DimensionsRequest, store: CatalogStore = Depends(get_catalog_store)):
    """Split extracted option values into already-known and new."""
    trace_id = set_trace_id()
    logger.info("option_analyze_request", dimensions=[d.name for d in request.dimensions], trace_id=trace_id)

    try:
        analyses = await OptionReconciler(store).analyze(request.dimensions)
        return AnalyzeResponse(analyses=analyses, trace_id=trace_id)
    except CatalogStoreError as e:
        logger.error("option_analyze_error", error=str(e), table=e.table)
        raise HTTPException(status_code=502, detail=str(e))


@app.post("/api/options/commit", response_model=CommitResponse)
async def commit_options(request: DimensionsRequest, store: CatalogStore = Depends(get_catalog_store)):
    """
    Persist new option types and values.

    Re-analyzes against the current catalog before writing, so repeated
    commits of the same dimensions are harmless.
    """
    trace_id = set_trace_id()
    logger.info("option_commit_request", dimensions=[d.name for d in request.dimensions], trace_id=trace_id)

    reconciler = OptionReconciler(store)
    try:
        analyses = await reconciler.analyze(request.dimensions)
        summary = await reconciler.commit(analyses)
    except CatalogStoreError as e:
        logger.error("option_commit_error", error=str(e), table=e.table)
        raise HTTPException(status_code=502, detail=str(e))

    return CommitResponse(summary=summary, message=f"Saved: {summary.describe()}", trace_id=trace_id)


@app.post("/api/availability/parse", response_model=AvailabilityParseResponse)
async def parse_availability(request: AvailabilityParseRequest):
    """Build an availability map from a twister snapshot."""
    trace_id = set_trace_id()
    logger.info(
        "availability_parse_request",
        primary_dimension=request.primary_dimension,
        html_length=len(request.html),
        trace_id=trace_id,
    )

    try:
        availability = extraction_layer.parse_availability(request.html, request.primary_dimension)
        return AvailabilityParseResponse(availability=availability, trace_id=trace_id)
    except StructuralParseError as e:
        raise _parse_error(e, "availability_parse_error")


@app.post("/api/availability/apply", response_model=AvailabilityApplyResponse)
async def apply_availability(request: AvailabilityApplyRequest):
    """Select or deselect one group's combinations from an availability map."""
    trace_id = set_trace_id()

    if not request.dimensions:
        raise HTTPException(status_code=422, detail="At least one option dimension is required")
    primary = request.primary_dimension or request.dimensions[0].name

    logger.info(
        "availability_apply_request",
        group=request.group_name,
        primary_dimension=primary,
        trace_id=trace_id,
    )

    combinations = combination_generator.generate(request.dimensions, request.selected_values)
    selected = extraction_layer.availability_parser.apply_availability(
        request.availability,
        combinations,
        group_name=request.group_name,
        primary_dimension_name=primary,
        selected=request.selected,
        permissive_secondary=request.permissive_secondary,
    )
    generated = {c.id for c in combinations}
    ordered = [c.id for c in combinations if c.id in selected] + sorted(selected - generated)
    return AvailabilityApplyResponse(selected=ordered, trace_id=trace_id)


@app.post("/api/combinations/generate", response_model=GenerateResponse)
async def generate_combinations(request: GenerateRequest):
    """Cartesian product of the selected option values, grouped by primary value."""
    trace_id = set_trace_id()
    logger.info("combination_request", dimensions=[d.name for d in request.dimensions], trace_id=trace_id)

    combinations = combination_generator.generate(request.dimensions, request.selected_values)
    groups = {}
    if request.dimensions:
        grouped = group_combinations(combinations, request.dimensions[0].name)
        groups = {name: [c.id for c in members] for name, members in grouped.items()}
    return GenerateResponse(combinations=combinations, groups=groups, trace_id=trace_id)


@app.post("/api/ingredients/parse", response_model=IngredientsResponse)
async def parse_ingredients(request: IngredientsRequest):
    """Split an ingredient statement into positioned records."""
    trace_id = set_trace_id()
    ingredients = parse_ingredient_list(request.text)
    logger.info("ingredient_parse_request", count=len(ingredients), trace_id=trace_id)
    return IngredientsResponse(ingredients=ingredients, trace_id=trace_id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
