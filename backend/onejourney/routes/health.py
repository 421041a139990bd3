from typing import Any, Dict

from fastapi import APIRouter, Depends

from onejourney.config import Settings
from onejourney.dependencies.services import get_assistant_service, get_route_source, get_settings
from onejourney.services.assistant_service import AssistantService
from onejourney.services.route_source import RouteSourceService

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health(
    settings: Settings = Depends(get_settings),
    route_source: RouteSourceService = Depends(get_route_source),
    assistant: AssistantService = Depends(get_assistant_service),
) -> Dict[str, Any]:
    """Liveness plus which upstream providers are configured (never their keys)."""
    return {
        "status": "ok",
        "googleMaps": route_source.directions is not None,
        "openRouter": assistant.available,
        "llmModel": settings.llm_model,
    }
