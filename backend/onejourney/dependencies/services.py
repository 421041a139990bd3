from fastapi import Depends, Request

from onejourney.config import Settings
from onejourney.services.assistant_service import AssistantService
from onejourney.services.challenge_service import ChallengeTracker
from onejourney.services.route_source import RouteSourceService
from onejourney.services.wallet_service import WalletService
from onejourney.state import AppState


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_app_state(request: Request) -> AppState:
    return request.app.state.onejourney


def get_challenge_tracker(state: AppState = Depends(get_app_state)) -> ChallengeTracker:
    return ChallengeTracker(state)


def get_wallet_service(
    state: AppState = Depends(get_app_state),
    challenges: ChallengeTracker = Depends(get_challenge_tracker),
) -> WalletService:
    return WalletService(state, challenges)


def get_route_source(request: Request) -> RouteSourceService:
    return request.app.state.route_source


def get_assistant_service(request: Request) -> AssistantService:
    return request.app.state.assistant
