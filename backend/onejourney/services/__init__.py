from .errors import ServiceError
from .route_scorer import score_routes
from .route_source import RouteSourceService, build_route_source
from .wallet_service import WalletService
from .challenge_service import ChallengeTracker
from .assistant_service import AssistantService, build_assistant_client

__all__ = [
    "ServiceError",
    "score_routes",
    "RouteSourceService",
    "build_route_source",
    "WalletService",
    "ChallengeTracker",
    "AssistantService",
    "build_assistant_client",
]
