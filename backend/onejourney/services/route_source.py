"""
Route Source - where raw transport options come from.

Two providers share one contract:

- `GoogleDirectionsProvider` asks the Google Directions API for transit
  alternatives and maps them onto local fares and emission rates. Any
  upstream problem (no key, HTTP error, non-OK status, no routes, odd
  payload) makes it return `None`.
- `MockRouteProvider` always answers with five synthetic options whose
  magnitudes vary by +/-20%.

`RouteSourceService` chains them: real data when available (broadened with
extra modes), synthetic data otherwise. Callers never see upstream errors.
"""

import logging
import random
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx

from onejourney.config import Settings
from onejourney.schemas.route_schemas import RouteCandidate
from onejourney.services.route_scorer import round_half_up

logger = logging.getLogger(__name__)


MAX_STEPS = 3
DEFAULT_DISTANCE_KM = 10.0

WALK_MARKER = "Walk"


@dataclass(frozen=True)
class ModeRate:
    """Flat fare and emission model for one mode: base + per-km."""

    label: str
    base_cost: float
    cost_per_km: float
    carbon_per_km: float

    def cost(self, distance_km: float) -> int:
        return round_half_up(self.base_cost + distance_km * self.cost_per_km)

    def carbon(self, distance_km: float) -> int:
        return round_half_up(distance_km * self.carbon_per_km)


CAB = ModeRate("🚕 Cab", 0, 12, 120)
METRO_WALK = ModeRate("🚇 Metro + Walk", 40, 2, 15)
METRO_AUTO = ModeRate("🚇 Metro + Auto", 60, 3, 20)
BUS = ModeRate("🚌 Bus", 20, 2, 25)

# Synthetic modes appended to real results.
BIKE_TAXI = ModeRate("🏍️ Bike Taxi", 0, 11, 30)
WALK_METRO = ModeRate("🚶 Walk + Metro", 0, 3.5, 8)
BIKE_TAXI_DURATION_FACTOR = 0.85
WALK_METRO_DURATION_FACTOR = 1.2

METRO_VEHICLES = {"SUBWAY", "METRO_RAIL"}
BUS_VEHICLES = {"BUS"}

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+))")


def leading_number(label: Optional[str], default: float = DEFAULT_DISTANCE_KM) -> float:
    """Parse the number a label starts with ("12.4 km" -> 12.4)."""
    if not label:
        return default
    match = _LEADING_NUMBER.match(label)
    if not match:
        return default
    return float(match.group(1))


def _vehicle_type(step: Dict[str, Any]) -> Optional[str]:
    details = step.get("transit_details") or {}
    return ((details.get("line") or {}).get("vehicle") or {}).get("type")


def classify_mode(steps: Sequence[Dict[str, Any]]) -> ModeRate:
    """Pick the fare model from the step-level transit metadata."""
    if not any(step.get("travel_mode") == "TRANSIT" for step in steps):
        return CAB

    vehicles = {_vehicle_type(step) for step in steps}
    has_metro = bool(vehicles & METRO_VEHICLES)
    has_bus = bool(vehicles & BUS_VEHICLES)
    has_walk = any(step.get("travel_mode") == "WALKING" for step in steps)

    if has_metro and has_walk:
        return METRO_WALK
    if has_metro:
        return METRO_AUTO
    if has_bus:
        return BUS
    return CAB


def _step_texts(steps: Sequence[Dict[str, Any]]) -> List[str]:
    texts = [step.get("html_instructions") or step.get("instructions") for step in steps]
    return [text for text in texts if text][:MAX_STEPS]


class DirectionsProvider(Protocol):
    def fetch(self, source: str, destination: str) -> Optional[List[RouteCandidate]]:
        ...


class GoogleDirectionsProvider:
    """Client for the Google Directions API (transit mode, with alternatives)."""

    BASE_URL = "https://maps.googleapis.com/maps/api"
    DEFAULT_TIMEOUT = 10.0
    MAX_ROUTES = 3

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.client = client or httpx.Client()

    def close(self) -> None:
        self.client.close()

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        response = self.client.get(f"{self.BASE_URL}/{endpoint}", params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def fetch(self, source: str, destination: str) -> Optional[List[RouteCandidate]]:
        params = {
            "origin": source,
            "destination": destination,
            "alternatives": "true",
            "mode": "transit",
            "key": self.api_key,
        }
        try:
            data = self._get("directions/json", params)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Google Maps API error: %s, using mock data", exc)
            return None

        status = data.get("status") if isinstance(data, dict) else None
        routes = data.get("routes") if isinstance(data, dict) else None
        if status != "OK" or not routes:
            logger.warning("Google Maps API returned no routes (status=%s), using mock data", status)
            return None

        try:
            return [self._to_candidate(index, route) for index, route in enumerate(routes[: self.MAX_ROUTES])]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("Unexpected Google Maps payload (%s: %s), using mock data", type(exc).__name__, exc)
            return None

    def _to_candidate(self, index: int, route: Dict[str, Any]) -> RouteCandidate:
        leg = route["legs"][0]
        distance_km = leg["distance"]["value"] / 1000
        steps = leg.get("steps") or []
        rate = classify_mode(steps)
        return RouteCandidate(
            id=index,
            mode=rate.label,
            duration=round_half_up(leg["duration"]["value"] / 60),
            cost=rate.cost(distance_km),
            carbon=rate.carbon(distance_km),
            distance=leg["distance"]["text"],
            steps=_step_texts(steps),
        )


def augment_with_additional_modes(routes: Sequence[RouteCandidate]) -> List[RouteCandidate]:
    """Append a bike taxi option, and a walk + metro option when none exists yet.

    Both are derived from the first route's duration and distance label.
    """
    enhanced = list(routes)
    if not routes:
        return enhanced

    first = routes[0]
    distance_km = leading_number(first.distance)

    enhanced.append(
        RouteCandidate(
            id=len(routes),
            mode=BIKE_TAXI.label,
            duration=round_half_up(first.duration * BIKE_TAXI_DURATION_FACTOR),
            cost=BIKE_TAXI.cost(distance_km),
            carbon=BIKE_TAXI.carbon(distance_km),
            distance=first.distance,
            steps=["Book bike taxi", "Direct ride", "Arrive at destination"],
        )
    )

    if not any(WALK_MARKER in route.mode for route in routes):
        enhanced.append(
            RouteCandidate(
                id=len(routes) + 1,
                mode=WALK_METRO.label,
                duration=round_half_up(first.duration * WALK_METRO_DURATION_FACTOR),
                cost=WALK_METRO.cost(distance_km),
                carbon=WALK_METRO.carbon(distance_km),
                distance=first.distance,
                steps=["Walk to metro station", "Take metro", "Walk to destination"],
            )
        )

    return enhanced


@dataclass(frozen=True)
class MockMode:
    icon: str
    name: str
    base_minutes: int
    base_cost: int
    base_carbon: int

    @property
    def label(self) -> str:
        return f"{self.icon} {self.name}"


MOCK_MODES = [
    MockMode("🚕", "Cab", 25, 180, 45),
    MockMode("🚇", "Metro + Auto", 35, 65, 15),
    MockMode("🚌", "Bus", 50, 30, 20),
    MockMode("🏍️", "Bike Taxi", 28, 120, 30),
    MockMode("🚶", "Walk + Metro", 45, 40, 8),
]


class MockRouteProvider:
    """Synthetic routes: fixed modes, each scaled by one factor in [0.8, 1.2]."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate(self, source: str, destination: str) -> List[RouteCandidate]:
        candidates = []
        for index, mode in enumerate(MOCK_MODES):
            variance = 0.8 + self.rng.random() * 0.4
            distance = 8 + self.rng.random() * 10
            candidates.append(
                RouteCandidate(
                    id=index,
                    mode=mode.label,
                    duration=round_half_up(mode.base_minutes * variance),
                    cost=round_half_up(mode.base_cost * variance),
                    carbon=round_half_up(mode.base_carbon * variance),
                    distance=f"{distance:.1f} km",
                    steps=[
                        f"Board {mode.name} from {source}",
                        "Travel via optimal route",
                        f"Arrive at {destination}",
                    ],
                )
            )
        return candidates

    def fetch(self, source: str, destination: str) -> Optional[List[RouteCandidate]]:
        return self.generate(source, destination)


@dataclass
class RouteFetchResult:
    routes: List[RouteCandidate]
    using_real_data: bool


class RouteSourceService:
    def __init__(
        self,
        directions: Optional[DirectionsProvider] = None,
        mock: Optional[MockRouteProvider] = None,
    ):
        self.directions = directions
        self.mock = mock or MockRouteProvider()

    def fetch_candidates(self, source: str, destination: str) -> RouteFetchResult:
        if self.directions is None:
            logger.warning("Google Maps API key not found, using mock data")
            real = None
        else:
            real = self.directions.fetch(source, destination)

        if real:
            return RouteFetchResult(routes=augment_with_additional_modes(real), using_real_data=True)
        return RouteFetchResult(routes=self.mock.generate(source, destination), using_real_data=False)


def build_route_source(settings: Settings) -> RouteSourceService:
    directions = None
    if settings.google_maps_api_key:
        directions = GoogleDirectionsProvider(
            settings.google_maps_api_key,
            timeout=settings.directions_timeout_seconds,
        )
    return RouteSourceService(directions=directions)
