import logging
from time import perf_counter

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..providers.base import ProviderError
from ..services.analysis import analyze_wallet
from ..services.address import normalize_address
from ..services.recommendations import recommend
from ..services.token_catalog import get_catalog
from ..types import AnalyzeRequest, AnalyzeResponse, RecommendRequest, RecommendationResponse
from .errors import provider_error_response

router = APIRouter(prefix="/api")
_logger = logging.getLogger(__name__)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_endpoint(request: AnalyzeRequest):
    """Holdings grouped by network plus recommendations for a wallet."""

    address = normalize_address(request.address)
    if not address:
        raise HTTPException(status_code=400, detail="Wallet address is required")

    start = perf_counter()
    try:
        analysis = await analyze_wallet(address, request.networks, request.limit)
    except ProviderError as exc:
        _logger.error("Wallet analysis failed for %s: %s", address, exc)
        return provider_error_response(exc)

    _logger.info(
        "Analyzed %s in %.0fms (%d tokens, %d recommendations)",
        address,
        (perf_counter() - start) * 1000,
        len(analysis.portfolio.holdings),
        len(analysis.recommendations),
    )
    return analysis.to_dict()


@router.post("/recommendations", response_model=RecommendationResponse)
async def recommendations_endpoint(request: RecommendRequest):
    """Rank candidates for caller-supplied holdings."""

    holdings = [h.model_dump() for h in request.holdings]
    if request.catalog is not None:
        catalog = [c.model_dump() for c in request.catalog]
    else:
        catalog = await get_catalog()

    limit = request.limit if request.limit is not None else settings.recommendation_count
    return recommend(holdings, catalog, limit).to_dict()
