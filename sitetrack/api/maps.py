from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from sitetrack.config import Settings
from sitetrack.dependencies import get_settings


router = APIRouter()


@router.get("/google-maps-key", response_class=PlainTextResponse)
async def get_google_maps_key(settings: Settings = Depends(get_settings)):
    """Return the configured Google Maps browser key as plain text"""
    if not settings.google_maps_api_key:
        raise HTTPException(status_code=404, detail="Google Maps API key not configured")
    return settings.google_maps_api_key
