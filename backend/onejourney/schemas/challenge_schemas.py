from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ChallengeId(str, Enum):
    SAVE_MONEY = "save_money"
    ECO_WARRIOR = "eco_warrior"
    FREQUENT_RIDER = "frequent_rider"


class Challenge(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: ChallengeId
    title: str
    description: str
    target: int = Field(..., gt=0)
    current: int = Field(0, ge=0)
    reward: str
    icon: str

    @property
    def is_met(self) -> bool:
        return self.current >= self.target


class ChallengeSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    week_start: datetime = Field(..., alias="weekStart")
    week_end: datetime = Field(..., alias="weekEnd")
    targets: List[Challenge]


class ChallengesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    challenges: ChallengeSet
    completed: List[str] = Field(default_factory=list, description="Challenge ids already rewarded this week")
    total_carbon_saved: int = Field(0, alias="totalCarbonSaved")
