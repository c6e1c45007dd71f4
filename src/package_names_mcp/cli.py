"""
Command line interface.

Usage:
    name-check left-pad
    name-check my-package --owner octocat --ttl 30
    name-check cache list
    name-check cache clear
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime

import httpx

from . import __version__
from .cache import CacheStore
from .checker import Availability, CheckReport, NameChecker, USER_AGENT
from .config import DEFAULT_TTL_MINUTES, is_debug, minutes_to_ms
from .fetcher import RateLimitedFetcher
from .synonyms import DatamuseSynonyms


def configure_logging() -> None:
    """Quiet httpx by default; PACKAGE_NAMES_DEBUG=1 turns everything on."""
    if is_debug():
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            stream=sys.stderr,
        )
    else:
        logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def _lower_strip(value: str) -> str:
    return value.lower().strip()


def build_check_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="name-check",
        description="Check package name availability on npm and GitHub",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s left-pad                    Check npm only
    %(prog)s my-package -o octocat       Check npm and octocat/my-package
    %(prog)s cache list                  Show cached lookups
    %(prog)s cache clear                 Delete the cache
        """
    )
    parser.add_argument("name", type=_lower_strip, help="package name")
    parser.add_argument(
        "-o", "--owner",
        type=_lower_strip,
        help="GitHub owner or organization name (required for checking repository name)"
    )
    parser.add_argument(
        "--ttl",
        type=float,
        default=DEFAULT_TTL_MINUTES,
        metavar="MINUTES",
        help=f"cache time-to-live in minutes (default: {DEFAULT_TTL_MINUTES})"
    )
    parser.add_argument(
        "--no-suggest",
        action="store_true",
        help="don't look for alternative names when the name is taken"
    )
    parser.add_argument(
        "--no-synonyms",
        action="store_true",
        help="don't use synonyms when generating alternative names"
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_cache_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="name-check cache", description="Manage the lookup cache")
    parser.add_argument("action", choices=["list", "clear"])
    return parser


def render_report(report: CheckReport) -> list[str]:
    """Format a report as output lines, one per platform plus a summary."""
    lines = []
    width = max(len(r.platform.label) for r in report.results) + 2

    for r in report.results:
        label = f"{r.platform.label}:".ljust(width)
        if r.error:
            lines.append(f"{label} {r.error}")
        elif r.status is Availability.AVAILABLE:
            lines.append(f"{label} ✓ Available")
        else:
            taken = f"{label} ✗ Taken"
            lines.append(f"{taken} ({r.url})" if r.url else taken)

    if report.available_platforms:
        names = ", ".join(p.label for p in report.available_platforms)
        lines.append(f"Available on: {names}")

    if report.suggestions:
        lines.append("")
        lines.append("Available alternatives:")
        lines.extend(f"  - {s}" for s in report.suggestions)

    return lines


async def run_check(
    name: str,
    owner: str | None,
    ttl_minutes: float,
    suggest: bool = True,
    use_synonyms: bool = True,
    cache: CacheStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CheckReport:
    """Wire up cache, fetcher and checker, then check one name."""
    cache = cache or CacheStore()
    ttl = minutes_to_ms(ttl_minutes)

    async with RateLimitedFetcher(headers={"User-Agent": USER_AGENT}, transport=transport) as fetcher:
        synonyms = DatamuseSynonyms(fetcher, cache, ttl) if use_synonyms else None
        checker = NameChecker(cache, fetcher, ttl=ttl, synonyms=synonyms)
        return await checker.check_name(name, owner=owner, suggest=suggest)


async def run_cache_command(action: str, cache: CacheStore | None = None) -> list[str]:
    cache = cache or CacheStore()

    if action == "clear":
        await cache.clear()
        return ["✓ Cache cleared"]

    entries = await cache.list()
    if not entries:
        return ["Cache is empty"]

    lines = [f"Cache file: {cache.path}", ""]
    for key, entry in entries.items():
        try:
            when = datetime.fromtimestamp(entry["timestamp"] / 1000).isoformat(timespec="seconds")
        except (KeyError, TypeError, ValueError, OSError):
            when = "?"
        data = entry.get("data") if isinstance(entry, dict) else None
        if isinstance(data, dict) and "available" in data:
            status = "available" if data["available"] else "taken"
        else:
            status = str(data)
        lines.append(f"  {key}  {status}  ({when})")
    return lines


def run(argv: list[str], transport: httpx.AsyncBaseTransport | None = None) -> int:
    """Run the CLI and return the exit status."""
    configure_logging()

    if argv[:1] == ["cache"]:
        args = build_cache_parser().parse_args(argv[1:])
        for line in asyncio.run(run_cache_command(args.action)):
            print(line)
        return 0

    args = build_check_parser().parse_args(argv)
    if not args.name:
        print("Error: No package name provided", file=sys.stderr)
        return 2

    print(f"Checking availability for {args.name} ...")
    report = asyncio.run(run_check(
        args.name,
        args.owner,
        args.ttl,
        suggest=not args.no_suggest,
        use_synonyms=not args.no_synonyms,
        transport=transport,
    ))
    for line in render_report(report):
        print(line)

    # Platform errors are reported inline, never as a failing exit status
    return 0
