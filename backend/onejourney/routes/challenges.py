from fastapi import APIRouter, Depends

from onejourney.dependencies.services import get_challenge_tracker, get_wallet_service
from onejourney.schemas.challenge_schemas import ChallengesResponse
from onejourney.services.challenge_service import ChallengeTracker
from onejourney.services.wallet_service import WalletService

router = APIRouter(prefix="/api", tags=["challenges"])


@router.get("/challenges", response_model=ChallengesResponse)
def get_challenges(
    tracker: ChallengeTracker = Depends(get_challenge_tracker),
    wallet: WalletService = Depends(get_wallet_service),
) -> ChallengesResponse:
    """
    Current weekly challenges with progress.

    Rolls over to a fresh week first when the current window has ended.
    """
    view = tracker.current()
    return ChallengesResponse(
        challenges=view.challenges,
        completed=view.completed,
        total_carbon_saved=wallet.get_state().carbon_saved,
    )
