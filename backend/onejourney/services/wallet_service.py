import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from onejourney.schemas.challenge_schemas import Challenge
from onejourney.schemas.wallet_schemas import TripRecord, UseRouteRequest, WalletSnapshot
from onejourney.services.challenge_service import ChallengeTracker
from onejourney.services.errors import insufficient_balance, invalid_amount, invalid_input
from onejourney.state import AppState, utcnow

logger = logging.getLogger(__name__)


DEFAULT_HISTORY_LIMIT = 20


class WalletService:
    """Single in-memory wallet: balance, cumulative savings and trip log."""

    def __init__(
        self,
        state: AppState,
        challenges: Optional[ChallengeTracker] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.state = state
        self.challenges = challenges or ChallengeTracker(state, clock=clock)
        self.clock = clock

    def get_state(self) -> WalletSnapshot:
        with self.state.lock:
            return self.state.wallet.model_copy(deep=True)

    def use_route(self, route: UseRouteRequest) -> Tuple[WalletSnapshot, List[Challenge]]:
        """Pay for a route, log the trip and advance the weekly challenges.

        The balance check and the debit happen under the state lock, so a
        rejected payment leaves both the wallet and the challenges untouched.
        """
        if not route.cost or route.cost < 0:
            raise invalid_input("Invalid route data", "cost")

        savings = route.savings or 0
        carbon = route.carbon or 0

        with self.state.lock:
            wallet = self.state.wallet
            if wallet.balance < route.cost:
                raise insufficient_balance(wallet.balance, route.cost)

            wallet.balance -= route.cost
            wallet.total_saved += max(savings, 0)
            wallet.carbon_saved += max(carbon, 0)
            wallet.trips.append(
                TripRecord(
                    mode=route.mode,
                    cost=route.cost,
                    savings=savings,
                    carbon=carbon,
                    duration=route.duration,
                    distance=route.distance,
                    timestamp=self.clock(),
                )
            )
            logger.info("Route used: %s for %s (balance now %s)", route.mode, route.cost, wallet.balance)

            completed = self.challenges.record_trip(savings=savings, carbon=carbon)
            return self.get_state(), completed

    def top_up(self, amount: Any) -> WalletSnapshot:
        if not amount or amount <= 0:
            raise invalid_amount(amount)
        with self.state.lock:
            self.state.wallet.balance += amount
            logger.info("Wallet topped up by %s (balance now %s)", amount, self.state.wallet.balance)
            return self.get_state()

    def history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> List[TripRecord]:
        """Most recent trips first."""
        with self.state.lock:
            trips = self.state.wallet.trips
            recent = trips[-limit:] if limit > 0 else []
            return list(reversed(recent))
