"""
Package Names MCP Server

An MCP server for checking package name availability on:
- the npm registry
- GitHub (owner/name repositories)

and suggesting alternative names when a name is taken.
"""

import json
import logging

from mcp.server.fastmcp import FastMCP

from . import __version__
from .cache import CacheStore
from .cli import run_check
from .config import DEFAULT_TTL_MINUTES, is_debug

# httpx logs every request URL at INFO; keep it quiet unless debugging
if not is_debug():
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

mcp = FastMCP("package-names")
mcp._mcp_server.version = __version__


@mcp.tool()
def version() -> str:
    """
    Get the server version.

    Returns:
        JSON with the version string.
    """
    return json.dumps({"version": __version__})


@mcp.tool()
async def check_name(
    name: str,
    owner: str | None = None,
    ttlMinutes: float = DEFAULT_TTL_MINUTES,
    suggest: bool = True,
) -> str:
    """
    Check whether a package name is available on npm and GitHub.

    Args:
        name: Package name to check (e.g., "left-pad")
        owner: GitHub owner or organization; without it GitHub is not checked
        ttlMinutes: How long cached lookups stay valid (default: 60)
        suggest: If true and the name is taken, suggest available alternatives

    Returns:
        JSON with per-platform results, availablePlatforms and suggestions.
    """
    name = name.lower().strip()
    if not name:
        return json.dumps({"error": "No package name provided"})

    owner = owner.lower().strip() if owner else None
    report = await run_check(name, owner, ttlMinutes, suggest=suggest)
    return json.dumps(report.to_dict())


@mcp.tool()
async def list_cache() -> str:
    """
    List every cached lookup, including expired entries.

    Returns:
        JSON mapping of cache key to {timestamp, data}.
    """
    return json.dumps(await CacheStore().list())


@mcp.tool()
async def clear_cache() -> str:
    """
    Delete all cached lookups.

    Returns:
        JSON confirming the cache was cleared.
    """
    await CacheStore().clear()
    return json.dumps({"cleared": True})
