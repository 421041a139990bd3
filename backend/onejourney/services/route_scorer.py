"""
Route scoring - ranks transport options for a single trip request.

Each candidate gets three sub-scores on a nominal 0-100 scale (higher is
better) which are blended into a `smartScore`:

    costScore   = 100 - cost / 5
    timeScore   = 100 - duration / 2
    carbonScore = 100 - carbon / 2
    smartScore  = 0.4 * costScore + 0.3 * timeScore + 0.3 * carbonScore

Sub-scores are not clamped unless `ScoringConfig.clamp_sub_scores` is set,
so very long or expensive trips can score below zero.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from onejourney.schemas.route_schemas import RouteCandidate, RouteConstraints, ScoredRoute


@dataclass(frozen=True)
class ScoringConfig:
    cost_weight: float = 0.4
    time_weight: float = 0.3
    carbon_weight: float = 0.3
    cost_divisor: float = 5.0
    time_divisor: float = 2.0
    carbon_divisor: float = 2.0
    clamp_sub_scores: bool = False


DEFAULT_SCORING = ScoringConfig()


def round_half_up(value: float) -> int:
    """Round halves towards positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def _sub_score(value: float, divisor: float, clamp: bool) -> float:
    score = 100 - value / divisor
    if clamp:
        return max(0.0, min(100.0, score))
    return score


def smart_score(route: RouteCandidate, config: ScoringConfig = DEFAULT_SCORING) -> int:
    cost_score = _sub_score(route.cost, config.cost_divisor, config.clamp_sub_scores)
    time_score = _sub_score(route.duration, config.time_divisor, config.clamp_sub_scores)
    carbon_score = _sub_score(route.carbon, config.carbon_divisor, config.clamp_sub_scores)
    blended = (
        cost_score * config.cost_weight
        + time_score * config.time_weight
        + carbon_score * config.carbon_weight
    )
    return round_half_up(blended)


def score_routes(
    candidates: Sequence[RouteCandidate],
    constraints: Optional[RouteConstraints] = None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> List[ScoredRoute]:
    """Annotate, filter and order a batch of route candidates.

    Savings are measured against the most expensive option of the whole
    batch, before any budget filter. A budget that excludes everything
    yields an empty list. Only one ordering applies: `fastest` wins over
    `eco_mode`, and the default is by descending smart score.
    """
    if not candidates:
        return []
    constraints = constraints or RouteConstraints()

    max_cost = max(route.cost for route in candidates)
    scored = [
        ScoredRoute(
            **route.model_dump(),
            smart_score=smart_score(route, config),
            savings=max_cost - route.cost,
        )
        for route in candidates
    ]

    if constraints.max_budget:
        scored = [route for route in scored if route.cost <= constraints.max_budget]

    if constraints.fastest:
        scored.sort(key=lambda r: r.duration)
    elif constraints.eco_mode:
        scored.sort(key=lambda r: r.carbon)
    else:
        scored.sort(key=lambda r: r.smart_score, reverse=True)

    return scored
