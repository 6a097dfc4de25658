"""Command-line interface for inspecting and maintaining an auction database."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pyauction.config import create_initial_state, get_rules
from pyauction.config_loader import LeagueProfile
from pyauction.engine import evaluate_all, reset
from pyauction.errors import AuctionError
from pyauction.ingest import AthleteOracle, sync_feed
from pyauction.persistence import StateStore
from pyauction.reports import ExportError, export_registry_csv, export_sale_report_csv


logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run and inspect a live player auction")
    parser.add_argument("--db", type=Path, default=Path("pyauction.sqlite"), help="State database path")
    parser.add_argument("--league", default=None, help="League rules key (e.g., SPL, SPL_MINI)")
    parser.add_argument("--load-profile", type=Path, default=None, help="Load league profile JSON")
    parser.add_argument("--save-profile", type=Path, default=None, help="Save the resolved league profile JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Print franchise purses and qualification")

    export = sub.add_parser("export", help="Write a CSV export")
    export.add_argument("kind", choices=("registry", "report"), help="Which export to write")
    export.add_argument("--sort", default="name", help="Registry sort key: name, original_team, role, price")
    export.add_argument("--order", default="asc", choices=("asc", "desc"), help="Registry sort order")
    export.add_argument("--output", type=Path, default=None, help="Output CSV path (stdout if omitted)")

    sub.add_parser("reset", help="Clear every sale and restore every purse")

    sync = sub.add_parser("sync", help="Refresh the unsold pool from the athlete feed")
    sync.add_argument("--api-key", default=None, help="Gemini API key (defaults to GEMINI_API_KEY)")

    serve = sub.add_parser("serve", help="Serve the REST API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    profile = LeagueProfile.load(args.load_profile) if args.load_profile else LeagueProfile()
    if args.league:
        profile.league = args.league
    if args.save_profile:
        profile.save(args.save_profile)
        print(f"Saved league profile to {args.save_profile}")
    rules = get_rules(profile.league)

    if args.command == "serve":
        import uvicorn

        from pyauction.api import create_app

        uvicorn.run(create_app(args.db, rules=rules, profile=profile), host=args.host, port=args.port)
        return 0

    store = StateStore(args.db)
    state = store.load_state(create_initial_state(rules, franchises=profile.franchises()))

    if args.command == "status":
        sold = len(state.sold())
        print(f"{rules.name} {rules.season}: {sold} sold, {len(state.available())} available")
        for franchise, report in zip(state.franchises, evaluate_all(state, rules)):
            print(
                f"  {franchise.name:<20} budget {franchise.budget:>6} "
                f"squad {report.squad_size:>2}  {report.status.value}"
            )
        return 0

    if args.command == "export":
        try:
            if args.kind == "registry":
                csv_text = export_registry_csv(state.athletes, args.sort, args.order)
            else:
                csv_text = export_sale_report_csv(state)
        except ExportError as exc:
            raise SystemExit(str(exc)) from exc
        if args.output:
            args.output.write_text(csv_text, encoding="utf-8")
            print(f"Wrote {args.kind} export to {args.output}")
        else:
            print(csv_text, end="")
        return 0

    if args.command == "reset":
        store.save_state(reset(state))
        print("Auction reset: every purse restored, every athlete unsold")
        return 0

    if args.command == "sync":
        try:
            state, report = sync_feed(state, AthleteOracle(args.api_key, rules=rules), rules)
        except AuctionError as exc:
            logger.error("Feed sync failed: %s", exc)
            return 1
        store.save_state(state)
        print(
            f"Kept {report.retained_sold} sold athletes, added {report.added}, "
            f"skipped {len(report.skipped_sold_names)} already sold"
        )
        return 0

    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
