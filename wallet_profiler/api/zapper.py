import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..providers.base import ProviderError
from ..providers.zapper import ZapperProvider
from ..services.address import AddressKind, detect_address_kind
from ..types import GraphQLRequest
from .errors import provider_error_response

router = APIRouter(prefix="/api")
_logger = logging.getLogger(__name__)

_provider = ZapperProvider()


def get_zapper_provider() -> ZapperProvider:
    return _provider


@router.post("/zapper")
async def zapper_proxy(request: GraphQLRequest):
    """Forward a GraphQL query to Zapper, dropping networks it rejects."""

    if not request.query:
        return JSONResponse({"error": "Missing GraphQL query"}, status_code=400)

    variables = request.variables or {}
    addresses = variables.get("addresses") or []
    if addresses:
        kind = detect_address_kind(str(addresses[0]))
        if kind is not AddressKind.UNKNOWN:
            _logger.info("Detected %s wallet address", kind.label)

    try:
        return await get_zapper_provider().execute(request.query, variables)
    except ProviderError as exc:
        _logger.error("Error in Zapper API route: %s", exc)
        return provider_error_response(exc)
