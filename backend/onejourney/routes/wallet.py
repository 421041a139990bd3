from fastapi import APIRouter, Depends

from onejourney.config import Settings
from onejourney.dependencies.services import get_settings, get_wallet_service
from onejourney.schemas.wallet_schemas import (
    HistoryResponse,
    TopUpRequest,
    TopUpResponse,
    UseRouteRequest,
    UseRouteResponse,
    WalletSnapshot,
)
from onejourney.services.wallet_service import WalletService

router = APIRouter(prefix="/api", tags=["wallet"])


@router.get("/wallet", response_model=WalletSnapshot)
def get_wallet(service: WalletService = Depends(get_wallet_service)) -> WalletSnapshot:
    """Return the wallet: balance, cumulative savings and the full trip log."""
    return service.get_state()


@router.post("/wallet/use", response_model=UseRouteResponse)
def use_route(
    payload: UseRouteRequest,
    service: WalletService = Depends(get_wallet_service),
) -> UseRouteResponse:
    """
    Pay for a route from the wallet.

    Request body: a route as returned by /api/optimize (at least `cost`).

    Returns the updated wallet plus `completedChallenges`, the challenges
    this trip completed (empty when none).

    Errors:
    - 400 INVALID_INPUT when `cost` is missing or zero
    - 400 INSUFFICIENT_BALANCE when the balance does not cover `cost`
    """
    wallet, completed = service.use_route(payload)
    return UseRouteResponse(**wallet.model_dump(), completed_challenges=completed)


@router.post("/wallet/topup", response_model=TopUpResponse)
def top_up(
    payload: TopUpRequest,
    service: WalletService = Depends(get_wallet_service),
) -> TopUpResponse:
    return TopUpResponse(wallet=service.top_up(payload.amount))


@router.get("/history", response_model=HistoryResponse)
def trip_history(
    service: WalletService = Depends(get_wallet_service),
    settings: Settings = Depends(get_settings),
) -> HistoryResponse:
    """Most recent trips first, capped at the configured history limit."""
    return HistoryResponse(trips=service.history(settings.history_limit))
