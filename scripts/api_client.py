"""Lightweight REST client for the batrank API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def build_mapping(name: str) -> dict[str, str]:
    if not name:
        return {}
    try:
        return json.loads(name)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid mapping JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the batrank REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("batters", type=Path, nargs="?", help="Batters CSV")
    parser.add_argument("--column-mapping", default="", help="JSON mapping for batter columns")
    parser.add_argument("--no-persist", action="store_true", help="Rank without storing the result")
    parser.add_argument("--top", type=int, default=10, help="Number of ranked batters to print")
    parser.add_argument("--list-stored", action="store_true", help="List the stored ranking and exit")
    parser.add_argument("--get-batter", metavar="PLAYER_ID", help="Fetch one stored batter and exit")
    parser.add_argument("--list-runs", action="store_true", help="List recent runs and exit")
    parser.add_argument("--export-path", type=Path, help="Download the stored ranking CSV to this path")
    args = parser.parse_args()

    if args.list_stored or args.get_batter or args.list_runs or args.export_path:
        with httpx.Client(base_url=args.base_url) as client:
            if args.list_stored:
                resp = client.get("/rankings")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.get_batter:
                resp = client.get(f"/rankings/{args.get_batter}")
                if resp.status_code == 404:
                    raise SystemExit(f"batter {args.get_batter} not found")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.list_runs:
                resp = client.get("/runs")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.export_path:
                resp = client.get("/rankings/export.csv")
                resp.raise_for_status()
                args.export_path.write_text(resp.text)
                print(f"CSV export saved to {args.export_path}")
        return

    if args.batters is None:
        raise SystemExit("a batters file is required unless using --list-stored/--get-batter/--list-runs/--export-path")

    mapping = build_mapping(args.column_mapping)
    files = {"batters": (args.batters.name, args.batters.read_bytes(), "text/csv")}
    data = {
        "column_mapping": json.dumps(mapping) if mapping else "",
        "persist": "false" if args.no_persist else "true",
    }

    with httpx.Client(base_url=args.base_url) as client:
        resp = client.post("/rankings", files=files, data=data)
        if resp.status_code == 422:
            raise SystemExit(f"ranking rejected: {resp.json().get('detail')}")
        resp.raise_for_status()
        payload = resp.json()
        print(f"Ranked {payload['population_size']} batters at {payload['ranked_at']}")
        for batter in payload["batters"][: args.top]:
            print(f"{batter['rank']:>4}. {batter['name']} ({batter['player_id']}) {batter['score']:+.4f}")
        if payload.get("run_id"):
            print(
                f"Run {payload['run_id']}: {len(payload['inserted_ids'])} inserted, "
                f"{len(payload['skipped_ids'])} kept"
            )


if __name__ == "__main__":
    main()
