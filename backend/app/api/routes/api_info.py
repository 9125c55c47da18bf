"""API Info — self-describing index of the public endpoints."""

from fastapi import APIRouter, Depends

from app.config import Settings, get_settings

router = APIRouter(prefix="/api/v1", tags=["meta"])

OPPORTUNITIES_PATH = "/api/v1/opportunities"


@router.get("")
async def api_info(settings: Settings = Depends(get_settings)):
    return {
        "message": "Opportunities API",
        "version": settings.api_version,
        "endpoints": {
            "opportunities": OPPORTUNITIES_PATH,
            "internships": f"{OPPORTUNITIES_PATH}/category/internships",
            "scholarships": f"{OPPORTUNITIES_PATH}/category/scholarships",
            "others": f"{OPPORTUNITIES_PATH}/category/others",
            "search": f"{OPPORTUNITIES_PATH}/search?q=keyword",
        },
    }
