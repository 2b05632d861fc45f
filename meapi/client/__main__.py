"""
Command-line client.

Usage:
    python -m meapi.client profile
    python -m meapi.client skills
    python -m meapi.client projects --skill go
    python -m meapi.client search tracker
    python -m meapi.client health
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from meapi.core.logs import configure_logging

from . import render
from .api import ClientError, ProfileClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="meapi.client", description="Query a running me-api server.")
    parser.add_argument("--base-url", default=None, help="Server URL (default: $MEAPI_BASE_URL)")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("profile", help="Full profile document")
    sub.add_parser("skills", help="Skills ranked by score")
    projects = sub.add_parser("projects", help="Projects, newest first")
    projects.add_argument("--skill", default="", help="Exact tag filter (case-insensitive)")
    search = sub.add_parser("search", help="Substring search over projects, skills and work")
    search.add_argument("query")
    sub.add_parser("health", help="Liveness check")
    return parser


async def run(args: argparse.Namespace) -> str:
    async with ProfileClient(args.base_url) as client:
        if args.command == "profile":
            return render.pretty(await client.get_profile())
        if args.command == "skills":
            return "\n".join(render.skill_lines(await client.top_skills()))
        if args.command == "projects":
            return render.pretty(await client.list_projects(skill=args.skill))
        if args.command == "search":
            return render.pretty(await client.search(args.query))
        return render.pretty(await client.health())


def main(argv: list[str] | None = None) -> int:
    configure_logging("WARNING")
    args = build_parser().parse_args(argv)
    try:
        output = asyncio.run(run(args))
    except ClientError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
