import logging

from fastapi import APIRouter, Depends

from onejourney.dependencies.services import get_route_source
from onejourney.schemas.route_schemas import OptimizeRequest, OptimizeResponse
from onejourney.services.errors import ServiceError, invalid_input
from onejourney.services.route_scorer import score_routes
from onejourney.services.route_source import RouteSourceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["optimize"])


@router.post("/optimize", response_model=OptimizeResponse)
def optimize_routes(
    payload: OptimizeRequest,
    route_source: RouteSourceService = Depends(get_route_source),
) -> OptimizeResponse:
    """
    Rank transport options between two places.

    Example Request:
        POST /api/optimize
        {"source": "T Nagar", "destination": "Guindy", "constraints": {"fastest": true}}

    Example Response:
        {
            "success": true,
            "routes": [{"id": 3, "mode": "🏍️ Bike Taxi", "smartScore": 71, "savings": 60, ...}],
            "source": "T Nagar",
            "destination": "Guindy",
            "usingRealData": false
        }
    """
    if not payload.source or not payload.destination:
        raise invalid_input(
            "Source and destination are required",
            "source" if not payload.source else "destination",
        )

    try:
        fetched = route_source.fetch_candidates(payload.source, payload.destination)
        routes = score_routes(fetched.routes, payload.constraints)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Optimize error for %r -> %r", payload.source, payload.destination)
        raise ServiceError(500, "OPTIMIZATION_FAILED", "Route optimization failed.", {})

    return OptimizeResponse(
        routes=routes,
        source=payload.source,
        destination=payload.destination,
        using_real_data=fetched.using_real_data,
    )
