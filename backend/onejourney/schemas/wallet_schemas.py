from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from onejourney.schemas.challenge_schemas import Challenge


class TripRecord(BaseModel):
    """Immutable snapshot of a route the user paid for."""

    model_config = ConfigDict(frozen=True)

    mode: Optional[str] = None
    cost: int
    savings: int = 0
    carbon: int = 0
    duration: Optional[int] = None
    distance: Optional[str] = None
    timestamp: datetime


class WalletSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    balance: int
    total_saved: int = Field(0, alias="totalSaved")
    carbon_saved: int = Field(0, alias="carbonSaved", description="Cumulative grams of CO2 avoided")
    trips: List[TripRecord] = Field(default_factory=list)


class UseRouteRequest(BaseModel):
    """A route as echoed back by the client; unknown fields are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Optional[str] = None
    cost: Optional[int] = None
    savings: Optional[int] = None
    carbon: Optional[int] = None
    duration: Optional[int] = None
    distance: Optional[str] = None


class UseRouteResponse(WalletSnapshot):
    completed_challenges: List[Challenge] = Field(default_factory=list, alias="completedChallenges")


class TopUpRequest(BaseModel):
    amount: Optional[int] = None


class TopUpResponse(BaseModel):
    success: bool = True
    wallet: WalletSnapshot


class HistoryResponse(BaseModel):
    success: bool = True
    trips: List[TripRecord]
