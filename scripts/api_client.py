"""Lightweight REST client for the pyauction API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _show(resp: httpx.Response) -> None:
    if resp.status_code >= 400:
        try:
            error = resp.json()
        except json.JSONDecodeError:
            error = {"message": resp.text}
        raise SystemExit(f"{resp.status_code}: {error.get('message', error)}")
    print(json.dumps(resp.json(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyauction REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--franchises", action="store_true", help="List franchises with qualification")
    parser.add_argument("--session", action="store_true", help="Show the current bidding session")
    parser.add_argument("--draw", action="store_true", help="Put a random unsold athlete on the block")
    parser.add_argument("--bid", metavar="FRANCHISE_ID", help="Place the next bid for a franchise")
    parser.add_argument("--sell", action="store_true", help="Finalize the sale to the leader")
    parser.add_argument("--price", type=int, default=None, help="Override price used with --sell")
    parser.add_argument("--skip", action="store_true", help="Skip the athlete on the block")
    parser.add_argument("--scout", action="store_true", help="Fetch a scouting report for the athlete on the block")
    parser.add_argument("--sync", action="store_true", help="Refresh the unsold pool from the feed")
    parser.add_argument("--export", choices=("registry", "report"), help="Download a CSV export")
    parser.add_argument("--export-path", type=Path, help="Destination path for exported CSV")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=60.0) as client:
        if args.franchises:
            _show(client.get("/franchises"))
        if args.sync:
            _show(client.post("/sync"))
        if args.draw:
            _show(client.post("/session/draw"))
        if args.bid:
            _show(client.post("/session/bid", json={"franchise_id": args.bid}))
        if args.scout:
            _show(client.get("/session/scouting"))
        if args.skip:
            _show(client.post("/session/skip"))
        if args.sell:
            _show(client.post("/session/finalize", json={"price": args.price}))
        if args.session:
            _show(client.get("/session"))
        if args.export:
            path = "/export/registry.csv" if args.export == "registry" else "/export/report.csv"
            resp = client.get(path)
            resp.raise_for_status()
            if args.export_path:
                args.export_path.write_text(resp.text)
                print(f"CSV export saved to {args.export_path}")
            else:
                print(resp.text)


if __name__ == "__main__":
    main()
