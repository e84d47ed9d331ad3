from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..services.token_catalog import get_catalog

router = APIRouter(prefix="/api")


@router.get("/coingecko")
async def get_token_catalog():
    """Market-ranked tokens with enriched categories."""

    tokens = await get_catalog()
    return JSONResponse(
        [token.to_dict() for token in tokens],
        headers={"Cache-Control": "public, max-age=1800"},
    )
