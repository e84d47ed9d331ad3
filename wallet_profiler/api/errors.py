"""Translate provider exceptions into the JSON error bodies the API returns."""

from fastapi.responses import JSONResponse

from ..providers.base import ProviderError, ProviderNotConfigured
from ..providers.zapper import ZapperError


def provider_error_response(exc: ProviderError) -> JSONResponse:
    if isinstance(exc, ProviderNotConfigured):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code or 500)

    if isinstance(exc, ZapperError):
        body = {"error": str(exc), "details": exc.details}
        if exc.errors:
            body["errors"] = exc.errors
        if exc.suggested_networks or str(exc) == "Invalid networks specified":
            body["suggestedNetworks"] = exc.suggested_networks
        return JSONResponse(body, status_code=exc.status_code or 400)

    return JSONResponse(
        {"error": "Failed to fetch data from provider", "details": str(exc)},
        status_code=500,
    )
