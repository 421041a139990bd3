"""
Weekly challenges.

Each challenge moves from in-progress to completed once `current` reaches
`target`; completion is terminal for the week. Completed ids go into the
state's completed log so the bonus credit is paid at most once per week.
A read after the week window has passed swaps in a fresh, zeroed set.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List

from onejourney.schemas.challenge_schemas import Challenge, ChallengeId, ChallengeSet
from onejourney.state import AppState, new_challenge_set, utcnow

logger = logging.getLogger(__name__)


# Wallet credit paid on completion; challenges not listed pay none.
CHALLENGE_BONUSES: Dict[str, int] = {
    ChallengeId.SAVE_MONEY.value: 100,
    ChallengeId.ECO_WARRIOR.value: 50,
}

# Emissions avoided are estimated as twice the chosen route's carbon.
ECO_CARBON_MULTIPLIER = 2


@dataclass
class ChallengeView:
    challenges: ChallengeSet
    completed: List[str]


class ChallengeTracker:
    def __init__(self, state: AppState, clock: Callable[[], datetime] = utcnow):
        self.state = state
        self.clock = clock

    def current(self) -> ChallengeView:
        """Return the challenge set, rolling over to a new week if it expired."""
        with self.state.lock:
            self.reset_if_expired()
            return ChallengeView(
                challenges=self.state.challenges.model_copy(deep=True),
                completed=list(self.state.completed),
            )

    def reset_if_expired(self) -> bool:
        with self.state.lock:
            now = self.clock()
            if now <= self.state.challenges.week_end:
                return False
            self.state.challenges = new_challenge_set(now)
            self.state.completed = []
            logger.info("Weekly challenges reset; new window ends %s", self.state.challenges.week_end.isoformat())
            return True

    def record_trip(self, savings: int = 0, carbon: int = 0) -> List[Challenge]:
        """Advance progress for one trip and pay out newly completed challenges."""
        with self.state.lock:
            increments = {
                ChallengeId.SAVE_MONEY.value: savings or 0,
                ChallengeId.ECO_WARRIOR.value: (carbon or 0) * ECO_CARBON_MULTIPLIER,
                ChallengeId.FREQUENT_RIDER.value: 1,
            }
            for challenge in self.state.challenges.targets:
                step = max(increments.get(challenge.id, 0), 0)
                challenge.current = max(0, min(challenge.current + step, challenge.target))
            return self.sweep_completed()

    def sweep_completed(self) -> List[Challenge]:
        newly_completed: List[Challenge] = []
        with self.state.lock:
            for challenge in self.state.challenges.targets:
                if not challenge.is_met or challenge.id in self.state.completed:
                    continue
                self.state.completed.append(challenge.id)
                bonus = CHALLENGE_BONUSES.get(challenge.id, 0)
                if bonus:
                    self.state.wallet.balance += bonus
                logger.info("Challenge %s completed (bonus %s)", challenge.id, bonus)
                newly_completed.append(challenge.model_copy())
        return newly_completed
