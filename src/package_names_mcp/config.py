"""
Configuration for Package Names MCP.

All settings come from environment variables with sensible defaults:

1. PACKAGE_NAMES_CACHE_FILE     - cache file location (default: per-user cache dir)
2. PACKAGE_NAMES_REGISTRY_URL   - npm registry base URL
3. PACKAGE_NAMES_GITHUB_API_URL - GitHub API base URL
4. PACKAGE_NAMES_DEBUG          - enable verbose logging (including httpx)
"""

import os
from pathlib import Path

APP_NAME = "package-names-mcp"

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DATAMUSE_API_URL = "https://api.datamuse.com/words"

# Cache TTL in minutes (CLI/MCP surface), converted to ms for the cache store
DEFAULT_TTL_MINUTES = 60
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_TIMEOUT = 10.0


def get_cache_dir() -> Path:
    """Get the cache directory for this app."""
    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    else:  # macOS, Linux
        base = Path(os.environ.get('XDG_CACHE_HOME', Path.home() / '.cache'))

    return base / APP_NAME


def get_cache_file() -> Path:
    """Get the path to the availability cache file."""
    if override := os.environ.get('PACKAGE_NAMES_CACHE_FILE'):
        return Path(override).expanduser()
    return get_cache_dir() / 'cache.json'


def get_registry_url() -> str:
    return os.environ.get('PACKAGE_NAMES_REGISTRY_URL', DEFAULT_REGISTRY_URL).rstrip('/')


def get_github_api_url() -> str:
    return os.environ.get('PACKAGE_NAMES_GITHUB_API_URL', DEFAULT_GITHUB_API_URL).rstrip('/')


def is_debug() -> bool:
    """Check if verbose logging was requested."""
    return os.environ.get('PACKAGE_NAMES_DEBUG', '').lower() in ('1', 'true', 'yes')


def minutes_to_ms(minutes: float) -> int:
    return int(minutes * 60 * 1000)
