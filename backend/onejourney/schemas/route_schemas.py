"""
Route planning DTOs.

Wire names follow the front-end JSON contract (camelCase). Python code uses
the snake_case attribute names; `populate_by_name` lets both forms in.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RouteCandidate(BaseModel):
    """A raw transport option produced by a route provider."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Position of the option in its batch")
    mode: str = Field(..., description="Transport mode label, e.g. '🚌 Bus'")
    duration: int = Field(..., description="Travel time in minutes")
    cost: int = Field(..., description="Fare in the smallest currency unit")
    carbon: int = Field(..., description="Emissions in grams of CO2")
    distance: str = Field(..., description="Human-readable distance label")
    steps: List[str] = Field(default_factory=list, description="Up to three instructions")


class ScoredRoute(RouteCandidate):
    """A candidate annotated by the route scorer."""

    smart_score: int = Field(..., alias="smartScore", description="Weighted score, higher is better")
    savings: int = Field(..., description="Most expensive option in the batch minus this cost")


class RouteConstraints(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_budget: Optional[float] = Field(None, alias="maxBudget")
    fastest: bool = False
    eco_mode: bool = Field(False, alias="ecoMode")


class OptimizeRequest(BaseModel):
    """
    Example:
        POST /api/optimize
        {
            "source": "T Nagar, Chennai",
            "destination": "Guindy, Chennai",
            "constraints": {"maxBudget": 150, "ecoMode": true}
        }
    """

    source: Optional[str] = None
    destination: Optional[str] = None
    constraints: RouteConstraints = Field(default_factory=RouteConstraints)


class OptimizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    routes: List[ScoredRoute]
    source: str
    destination: str
    using_real_data: bool = Field(..., alias="usingRealData")
