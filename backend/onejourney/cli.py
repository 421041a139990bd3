"""
Command-line interface for the OneJourney backend.

    onejourney optimize "T Nagar, Chennai" "Guindy, Chennai" --max-budget 150 --eco
    onejourney serve --port 5000
"""

import argparse
import sys

from dotenv import load_dotenv

from onejourney.config import Settings, configure_logging
from onejourney.schemas.route_schemas import RouteConstraints
from onejourney.services.route_scorer import score_routes
from onejourney.services.route_source import build_route_source


def cmd_optimize(args, settings: Settings):
    """
    Print ranked routes between two places.

    Args:
        args: Parsed command-line arguments with fields:
            - source, destination: free-text places
            - max_budget: optional fare ceiling
            - fastest / eco: ordering flags
    """
    if args.max_budget is not None and args.max_budget <= 0:
        print(f"Error: --max-budget must be greater than 0. Got: {args.max_budget}")
        sys.exit(1)

    constraints = RouteConstraints(
        max_budget=args.max_budget,
        fastest=args.fastest,
        eco_mode=args.eco,
    )
    route_source = build_route_source(settings)
    fetched = route_source.fetch_candidates(args.source, args.destination)
    routes = score_routes(fetched.routes, constraints)

    print(f"\n=== Routes: {args.source} -> {args.destination} ===")
    print(f"Data: {'Google Maps' if fetched.using_real_data else 'simulated'}\n")

    if not routes:
        print("No routes fit the given budget.")
        return

    for i, route in enumerate(routes, 1):
        print(f"{i}. {route.mode} - ₹{route.cost}, {route.duration} min, {route.carbon} g CO₂ "
              f"(score {route.smart_score}, saves ₹{route.savings})")
        for step in route.steps:
            print(f"   • {step}")
        print()


def cmd_serve(args, settings: Settings):
    """Run the HTTP API with uvicorn."""
    from onejourney.main import run

    run(host=args.host, port=args.port)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="OneJourney smart mobility CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_optimize = subparsers.add_parser("optimize", help="Rank routes between two places")
    parser_optimize.add_argument("source", help="Starting point")
    parser_optimize.add_argument("destination", help="Destination")
    parser_optimize.add_argument("--max-budget", type=float, default=None, help="Drop routes costing more than this")
    parser_optimize.add_argument("--fastest", action="store_true", help="Order by travel time")
    parser_optimize.add_argument("--eco", action="store_true", help="Order by emissions")

    parser_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    parser_serve.add_argument("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
    parser_serve.add_argument("--port", type=int, default=None, help="Port (default: PORT or 5000)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if args.command == "optimize":
        cmd_optimize(args, settings)
    elif args.command == "serve":
        cmd_serve(args, settings)


if __name__ == "__main__":
    main()
