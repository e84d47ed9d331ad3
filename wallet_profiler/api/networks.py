from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..services.networks import get_networks

router = APIRouter(prefix="/api")


@router.get("/networks")
async def list_networks():
    """Network enum values Zapper accepts, merged with the default list."""

    result = await get_networks()
    return JSONResponse(
        result.to_dict(),
        headers={"Cache-Control": "public, max-age=86400"},
    )
