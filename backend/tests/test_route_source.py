"""Tests for the route source: Google Directions mapping, augmentation and mock fallback.

The Directions client is exercised through httpx.MockTransport, so no
request ever leaves the process.
"""

import logging
import random
import re
from unittest.mock import MagicMock

import httpx
import pytest

from onejourney.config import Settings
from onejourney.schemas.route_schemas import RouteCandidate
from onejourney.services.route_source import (
    MOCK_MODES,
    GoogleDirectionsProvider,
    MockRouteProvider,
    RouteSourceService,
    augment_with_additional_modes,
    build_route_source,
    classify_mode,
    leading_number,
)


def _transit_step(vehicle_type, text="Board transit"):
    return {
        "travel_mode": "TRANSIT",
        "html_instructions": text,
        "transit_details": {"line": {"vehicle": {"type": vehicle_type}}},
    }


def _walk_step(text="Walk to station"):
    return {"travel_mode": "WALKING", "html_instructions": text}


def _drive_step(text="Head north"):
    return {"travel_mode": "DRIVING", "html_instructions": text}


def _route(distance_m, distance_text, duration_s, steps):
    return {
        "legs": [
            {
                "distance": {"value": distance_m, "text": distance_text},
                "duration": {"value": duration_s},
                "steps": steps,
            }
        ]
    }


def _directions_payload():
    return {
        "status": "OK",
        "routes": [
            _route(
                10000,
                "10.0 km",
                2400,
                [
                    _walk_step("Walk to Guindy station"),
                    _transit_step("SUBWAY", "Metro towards Airport"),
                    _walk_step("Walk to destination"),
                    _walk_step("Turn left"),
                ],
            ),
            _route(12000, "12.0 km", 2400, [_transit_step("BUS", "Bus 21G")]),
            _route(8000, "8.0 km", 1200, [_drive_step()]),
            _route(9000, "9.0 km", 1500, [_drive_step()]),
        ],
    }


def _provider(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GoogleDirectionsProvider("fake-key", client=client)


def _fixed_rng(value=0.5):
    rng = MagicMock(spec=random.Random)
    rng.random.return_value = value
    return rng


class TestLeadingNumber:
    def test_parses_distance_label(self):
        assert leading_number("12.4 km") == 12.4
        assert leading_number("7 mi") == 7.0

    def test_defaults_when_unparseable(self):
        assert leading_number("") == 10.0
        assert leading_number(None) == 10.0
        assert leading_number("about 5 km") == 10.0


class TestClassifyMode:
    def test_no_transit_is_cab(self):
        assert classify_mode([_drive_step()]).label == "🚕 Cab"
        assert classify_mode([]).label == "🚕 Cab"

    def test_metro_with_walking(self):
        assert classify_mode([_walk_step(), _transit_step("METRO_RAIL")]).label == "🚇 Metro + Walk"

    def test_metro_without_walking(self):
        assert classify_mode([_transit_step("SUBWAY")]).label == "🚇 Metro + Auto"

    def test_bus(self):
        assert classify_mode([_walk_step(), _transit_step("BUS")]).label == "🚌 Bus"

    def test_other_transit_falls_back_to_cab(self):
        assert classify_mode([_transit_step("FERRY")]).label == "🚕 Cab"


class TestGoogleDirectionsProvider:
    def test_maps_first_three_routes(self):
        provider = _provider(lambda request: httpx.Response(200, json=_directions_payload()))

        routes = provider.fetch("T Nagar", "Guindy")

        assert routes is not None
        assert len(routes) == 3

        metro, bus, cab = routes
        assert (metro.id, metro.mode, metro.duration, metro.cost, metro.carbon) == (0, "🚇 Metro + Walk", 40, 60, 150)
        assert metro.distance == "10.0 km"
        # Only the first three instructions are kept
        assert metro.steps == ["Walk to Guindy station", "Metro towards Airport", "Walk to destination"]

        assert (bus.mode, bus.cost, bus.carbon) == ("🚌 Bus", 44, 300)
        assert (cab.mode, cab.duration, cab.cost, cab.carbon) == ("🚕 Cab", 20, 96, 960)

    def test_sends_transit_alternatives_query(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return httpx.Response(200, json=_directions_payload())

        _provider(handler).fetch("T Nagar, Chennai", "Guindy")

        params = seen["url"].params
        assert seen["url"].path == "/maps/api/directions/json"
        assert params["origin"] == "T Nagar, Chennai"
        assert params["destination"] == "Guindy"
        assert params["mode"] == "transit"
        assert params["alternatives"] == "true"
        assert params["key"] == "fake-key"

    def test_falls_back_on_non_ok_status(self, caplog):
        provider = _provider(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "routes": []}))

        with caplog.at_level(logging.WARNING):
            assert provider.fetch("A", "B") is None

        assert any("ZERO_RESULTS" in record.message for record in caplog.records)

    def test_falls_back_on_http_error(self):
        provider = _provider(lambda request: httpx.Response(500, text="oops"))
        assert provider.fetch("A", "B") is None

    def test_falls_back_on_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("network down", request=request)

        assert _provider(handler).fetch("A", "B") is None

    def test_falls_back_on_invalid_json(self):
        provider = _provider(lambda request: httpx.Response(200, text="<html>not json</html>"))
        assert provider.fetch("A", "B") is None

    def test_falls_back_on_malformed_route(self):
        payload = {"status": "OK", "routes": [{"legs": []}]}
        provider = _provider(lambda request: httpx.Response(200, json=payload))
        assert provider.fetch("A", "B") is None


class TestAugmentation:
    def test_adds_bike_taxi_only_when_walk_option_exists(self):
        routes = [
            RouteCandidate(id=0, mode="🚇 Metro + Walk", duration=40, cost=60, carbon=150, distance="10.0 km"),
        ]

        enhanced = augment_with_additional_modes(routes)

        assert len(enhanced) == 2
        bike = enhanced[1]
        assert (bike.id, bike.mode, bike.duration, bike.cost, bike.carbon) == (1, "🏍️ Bike Taxi", 34, 110, 300)
        assert bike.distance == "10.0 km"

    def test_adds_walk_and_metro_when_missing(self):
        routes = [
            RouteCandidate(id=0, mode="🚌 Bus", duration=40, cost=44, carbon=300, distance="10.0 km"),
            RouteCandidate(id=1, mode="🚕 Cab", duration=20, cost=96, carbon=960, distance="8.0 km"),
        ]

        enhanced = augment_with_additional_modes(routes)

        assert [r.mode for r in enhanced] == ["🚌 Bus", "🚕 Cab", "🏍️ Bike Taxi", "🚶 Walk + Metro"]
        walk = enhanced[3]
        assert (walk.id, walk.duration, walk.cost, walk.carbon) == (3, 48, 35, 80)

    def test_unparseable_distance_uses_ten_km(self):
        routes = [RouteCandidate(id=0, mode="🚌 Bus", duration=40, cost=44, carbon=300, distance="n/a")]
        bike = augment_with_additional_modes(routes)[1]
        assert bike.cost == 110

    def test_empty_input(self):
        assert augment_with_additional_modes([]) == []


class TestMockRouteProvider:
    def test_generates_five_modes_in_fixed_order(self):
        routes = MockRouteProvider(random.Random(7)).generate("T Nagar", "Guindy")

        assert [r.mode for r in routes] == [m.label for m in MOCK_MODES]
        assert [r.id for r in routes] == [0, 1, 2, 3, 4]

    def test_magnitudes_within_twenty_percent(self):
        routes = MockRouteProvider(random.Random(11)).generate("A", "B")

        for route, mode in zip(routes, MOCK_MODES):
            assert round(mode.base_minutes * 0.8) <= route.duration <= round(mode.base_minutes * 1.2)
            assert round(mode.base_cost * 0.8) <= route.cost <= round(mode.base_cost * 1.2)
            assert round(mode.base_carbon * 0.8) <= route.carbon <= round(mode.base_carbon * 1.2)
            assert re.fullmatch(r"\d+\.\d km", route.distance)

    def test_midpoint_variance_reproduces_base_table(self):
        routes = MockRouteProvider(_fixed_rng(0.5)).generate("A", "B")

        assert [(r.duration, r.cost, r.carbon) for r in routes] == [
            (25, 180, 45),
            (35, 65, 15),
            (50, 30, 20),
            (28, 120, 30),
            (45, 40, 8),
        ]
        assert all(r.distance == "13.0 km" for r in routes)

    def test_steps_mention_both_ends(self):
        cab = MockRouteProvider(random.Random(1)).generate("Central", "Airport")[0]
        assert cab.steps == ["Board Cab from Central", "Travel via optimal route", "Arrive at Airport"]


class _StubDirections:
    def __init__(self, routes):
        self.routes = routes
        self.calls = 0

    def fetch(self, source, destination):
        self.calls += 1
        return self.routes


class TestRouteSourceService:
    def test_no_provider_uses_mock(self, caplog):
        service = RouteSourceService(directions=None, mock=MockRouteProvider(_fixed_rng()))

        with caplog.at_level(logging.WARNING):
            result = service.fetch_candidates("A", "B")

        assert result.using_real_data is False
        assert len(result.routes) == 5
        assert any("mock data" in record.message for record in caplog.records)

    def test_failed_provider_uses_mock(self):
        directions = _StubDirections(None)
        service = RouteSourceService(directions=directions, mock=MockRouteProvider(_fixed_rng()))

        result = service.fetch_candidates("A", "B")

        assert directions.calls == 1
        assert result.using_real_data is False
        assert len(result.routes) == 5

    def test_empty_provider_result_uses_mock(self):
        service = RouteSourceService(directions=_StubDirections([]), mock=MockRouteProvider(_fixed_rng()))
        assert service.fetch_candidates("A", "B").using_real_data is False

    def test_real_routes_are_augmented(self):
        real = [RouteCandidate(id=0, mode="🚌 Bus", duration=40, cost=44, carbon=300, distance="10.0 km")]
        service = RouteSourceService(directions=_StubDirections(real))

        result = service.fetch_candidates("A", "B")

        assert result.using_real_data is True
        assert [r.mode for r in result.routes] == ["🚌 Bus", "🏍️ Bike Taxi", "🚶 Walk + Metro"]

    def test_mock_provider_can_stand_in_for_directions(self):
        service = RouteSourceService(directions=MockRouteProvider(_fixed_rng()))

        result = service.fetch_candidates("A", "B")

        # Mock table already has a walk option, so only the bike taxi is added
        assert result.using_real_data is True
        assert len(result.routes) == 6

    def test_build_without_key_has_no_directions(self):
        assert build_route_source(Settings()).directions is None

    def test_build_with_key_uses_google(self):
        service = build_route_source(Settings(google_maps_api_key="k", directions_timeout_seconds=3))
        assert isinstance(service.directions, GoogleDirectionsProvider)
        assert service.directions.timeout == 3
        service.directions.close()
