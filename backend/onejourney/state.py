"""
In-memory application state.

One `AppState` holds the wallet, the weekly challenge set and the log of
challenges already rewarded. It is created when the app is built and handed
to services through dependency injection, so tests can build their own.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from onejourney.schemas.challenge_schemas import Challenge, ChallengeId, ChallengeSet
from onejourney.schemas.wallet_schemas import WalletSnapshot


CHALLENGE_WINDOW = timedelta(days=7)

# Weekly targets, in display order.
CHALLENGE_TEMPLATES = [
    {
        "id": ChallengeId.SAVE_MONEY,
        "title": "Smart Saver",
        "description": "Save ₹500 this week",
        "target": 500,
        "reward": "🏆 +100 bonus",
        "icon": "💰",
    },
    {
        "id": ChallengeId.ECO_WARRIOR,
        "title": "Eco Warrior",
        "description": "Save 500g CO₂ this week",
        "target": 500,
        "reward": "🌳 Plant a tree",
        "icon": "🌿",
    },
    {
        "id": ChallengeId.FREQUENT_RIDER,
        "title": "Travel Pro",
        "description": "Take 10 trips this week",
        "target": 10,
        "reward": "⭐ Premium Badge",
        "icon": "🚀",
    },
]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_challenge_set(now: datetime) -> ChallengeSet:
    """Fresh, zeroed targets for the week starting at `now`."""
    return ChallengeSet(
        week_start=now,
        week_end=now + CHALLENGE_WINDOW,
        targets=[Challenge(current=0, **template) for template in CHALLENGE_TEMPLATES],
    )


@dataclass
class AppState:
    wallet: WalletSnapshot
    challenges: ChallengeSet
    completed: List[str] = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)


def create_app_state(
    initial_balance: int = 2500,
    now: Optional[datetime] = None,
    clock: Callable[[], datetime] = utcnow,
) -> AppState:
    started_at = now or clock()
    return AppState(
        wallet=WalletSnapshot(balance=initial_balance, total_saved=0, carbon_saved=0, trips=[]),
        challenges=new_challenge_set(started_at),
    )
