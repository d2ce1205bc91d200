"""Advisory and insights endpoints.

The advisory service never raises; a failed model call shows up as its
fallback text or a zero-valued price suggestion with status 200.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from lumina.advisory import AdvisoryService, AnalysisBoard
from lumina.api.dependencies import get_advisory, get_analysis_board, get_catalog
from lumina.catalog import CatalogStore
from lumina.schemas import (
    AdvisoryRequest,
    AnalysisResponse,
    DescriptionResponse,
    PriceSuggestionResponse,
)

router = APIRouter(tags=["Advisory"])


def board_to_response(board: AnalysisBoard) -> AnalysisResponse:
    """Describe the latest analysis."""
    return AnalysisResponse(
        report=board.report,
        analyzing=board.analyzing,
        generated_at=board.generated_at,
        product_count=board.product_count,
    )


@router.post(
    "/advisory/description",
    response_model=DescriptionResponse,
    summary="Generate a product description",
)
async def generate_description(
    request: AdvisoryRequest,
    advisory: Annotated[AdvisoryService, Depends(get_advisory)],
) -> DescriptionResponse:
    """Write a two-sentence marketing description for the product."""
    text = await advisory.generate_description(request.name, request.category)
    return DescriptionResponse(description=text)


@router.post(
    "/advisory/price",
    response_model=PriceSuggestionResponse,
    summary="Suggest a price range",
)
async def suggest_price(
    request: AdvisoryRequest,
    advisory: Annotated[AdvisoryService, Depends(get_advisory)],
) -> PriceSuggestionResponse:
    """Suggest a price range and its midpoint for the product."""
    suggestion = await advisory.suggest_price_range(request.name, request.category)
    return PriceSuggestionResponse.from_suggestion(suggestion)


@router.post(
    "/insights/analysis",
    response_model=AnalysisResponse,
    summary="Run inventory risk analysis",
    tags=["Insights"],
)
async def run_analysis(
    catalog: Annotated[CatalogStore, Depends(get_catalog)],
    advisory: Annotated[AdvisoryService, Depends(get_advisory)],
    board: Annotated[AnalysisBoard, Depends(get_analysis_board)],
) -> AnalysisResponse:
    """Analyze the catalog as it is now and publish the report."""
    await board.run(advisory, catalog.snapshot())
    return board_to_response(board)


@router.get(
    "/insights/analysis",
    response_model=AnalysisResponse,
    summary="Latest inventory risk analysis",
    tags=["Insights"],
)
async def get_analysis(
    board: Annotated[AnalysisBoard, Depends(get_analysis_board)],
) -> AnalysisResponse:
    """Return the most recent report, if any."""
    return board_to_response(board)
