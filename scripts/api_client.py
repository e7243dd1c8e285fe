"""Lightweight REST client for the pyfide API."""

from __future__ import annotations

import argparse
import json

import httpx


def _params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise SystemExit(f"Invalid query parameter '{pair}', expected key=value")
        key, value = pair.split("=", 1)
        params[key.strip()] = value.strip()
    return params


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyfide REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--player", metavar="ID", help="Fetch one player by id")
    parser.add_argument("--search", metavar="NAME", help="Search players by name")
    parser.add_argument("--rankings", choices=("standard", "rapid", "blitz"), help="Fetch a rating ranking")
    parser.add_argument("--age-group", metavar="CODE", help="Fetch the ranking for an age group")
    parser.add_argument("--stats", action="store_true", help="Fetch the overall statistics report")
    parser.add_argument("--age-group-stats", action="store_true", help="Fetch per age-group statistics")
    parser.add_argument("--titles", action="store_true", help="Fetch the title summary")
    parser.add_argument("--title-type", metavar="TYPE", help="List players holding a title category")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        help="Extra query parameter (e.g., gender=F, page=1, includeInactive=true)",
    )
    args = parser.parse_args()
    params = _params(args.param)

    requests: list[tuple[str, dict[str, str]]] = []
    if args.player:
        requests.append((f"/players/{args.player}", {}))
    if args.search:
        requests.append(("/players/search/by-name", {"name": args.search, **params}))
    if args.rankings:
        requests.append((f"/rankings/{args.rankings}", params))
    if args.age_group:
        requests.append((f"/rankings/age-group/{args.age_group}", params))
    if args.stats:
        requests.append(("/players/stats", params))
    if args.age_group_stats:
        requests.append(("/players/stats/age-groups", params))
    if args.titles:
        requests.append(("/players/titles/all", {}))
    if args.title_type:
        requests.append(("/players/titles/by-type", {"type": args.title_type}))
    if not requests:
        raise SystemExit("nothing to fetch; pass one of --player/--search/--rankings/--age-group/--stats/--titles")

    with httpx.Client(base_url=args.base_url) as client:
        for path, query in requests:
            resp = client.get(path, params=query)
            payload = resp.json()
            if not payload.get("success", False):
                error = payload.get("error", {})
                raise SystemExit(f"{path}: {error.get('code')} {error.get('message')}")
            print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
