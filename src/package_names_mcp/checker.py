"""
Package name availability checking.

Checks a name on the npm registry and on GitHub, consulting the cache first
and falling back to the rate-limited fetcher. When the name is taken
somewhere, alternative names are generated and re-checked one at a time.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass, field
from enum import Enum

import httpx

from . import __version__
from .alternatives import generate_alternatives, to_hyphen_case
from .cache import CacheStore
from .config import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TTL_MINUTES,
    get_github_api_url,
    get_registry_url,
    minutes_to_ms,
)
from .fetcher import FetchError, RateLimitedFetcher
from .synonyms import DatamuseSynonyms

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 10
# Seconds added per candidate before checking it (index * STAGGER_DELAY)
STAGGER_DELAY = 0.2

USER_AGENT = f"package-names-mcp/{__version__}"
MISSING_OWNER_ERROR = "Specify owner with -o to check GitHub repo"


class Platform(Enum):
    """Platforms a name can be claimed on. Values double as cache key prefixes."""

    REGISTRY = "registry"
    REPO_HOST = "repo-host"

    @property
    def label(self) -> str:
        return "npm" if self is Platform.REGISTRY else "github"


class Availability(Enum):
    """Status categories for a single platform check."""

    AVAILABLE = "available"  # 404 - free to claim
    TAKEN = "taken"  # exists already
    UNKNOWN = "unknown"  # not checked or check failed - never cached


@dataclass(frozen=True)
class AvailabilityResult:
    """Result of checking a name on one platform."""

    platform: Platform
    status: Availability
    url: str | None = None
    message: str | None = None
    error: str | None = None
    checked: bool = True  # False when the check was not attempted (e.g. no owner)

    @property
    def available(self) -> bool | None:
        """Tri-state view: True, False, or None when unknown."""
        if self.status is Availability.UNKNOWN:
            return None
        return self.status is Availability.AVAILABLE

    def to_dict(self) -> dict:
        data = {
            "platform": self.platform.value,
            "available": self.available,
        }
        for key in ("url", "message", "error"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "AvailabilityResult":
        """Rebuild a cached result. Raises ValueError/KeyError on bad data."""
        available = data["available"]
        if available is True:
            status = Availability.AVAILABLE
        elif available is False:
            status = Availability.TAKEN
        else:
            raise ValueError(f"Cannot restore result with available={available!r}")
        return cls(
            platform=Platform(data["platform"]),
            status=status,
            url=data.get("url"),
            message=data.get("message"),
        )


@dataclass
class CheckReport:
    """Aggregate result of checking one name on every platform."""

    name: str
    results: list[AvailabilityResult]
    owner: str | None = None
    suggestions: list[str] = field(default_factory=list)

    @property
    def available_platforms(self) -> list[Platform]:
        return [r.platform for r in self.results if r.status is Availability.AVAILABLE]

    @property
    def is_taken_somewhere(self) -> bool:
        return any(r.status is Availability.TAKEN for r in self.results)

    @property
    def fully_available(self) -> bool:
        """True if every platform that was checked reports available."""
        checked = [r for r in self.results if r.checked]
        return bool(checked) and all(r.status is Availability.AVAILABLE for r in checked)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["results"] = [r.to_dict() for r in self.results]
        data["availablePlatforms"] = [p.value for p in self.available_platforms]
        return data


def registry_key(name: str) -> str:
    return f"{Platform.REGISTRY.value}:{name}"


def repo_host_key(owner: str, name: str) -> str:
    return f"{Platform.REPO_HOST.value}:{owner}/{name}"


def _json_or_none(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return None


class NameChecker:
    """
    Checks name availability with caching and suggestions.

    Usage:
        async with RateLimitedFetcher() as fetcher:
            checker = NameChecker(CacheStore(), fetcher)
            report = await checker.check_name("left-pad", owner="octocat")
    """

    def __init__(
        self,
        cache: CacheStore,
        fetcher: RateLimitedFetcher,
        ttl: int = minutes_to_ms(DEFAULT_TTL_MINUTES),
        synonyms: DatamuseSynonyms | None = None,
        registry_url: str | None = None,
        github_api_url: str | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        stagger: float = STAGGER_DELAY,
        max_suggestions: int = MAX_SUGGESTIONS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher
        self._ttl = ttl
        self._synonyms = synonyms
        self._registry_url = (registry_url or get_registry_url()).rstrip("/")
        self._github_api_url = (github_api_url or get_github_api_url()).rstrip("/")
        self._max_attempts = max_attempts
        self._stagger = stagger
        self._max_suggestions = max_suggestions
        self._sleep = sleep

    async def _cached(self, key: str) -> AvailabilityResult | None:
        data = await self._cache.get(key, self._ttl)
        if data is None:
            return None
        try:
            result = AvailabilityResult.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.debug("Ignoring malformed cache entry %s", key)
            return None
        logger.debug("Cache hit for %s", key)
        return result

    async def _store(self, key: str, result: AvailabilityResult) -> AvailabilityResult:
        if result.status is not Availability.UNKNOWN:
            await self._cache.set(key, result.to_dict())
        return result

    # =========================================================================
    # Per-platform checks
    # =========================================================================

    async def check_registry(self, name: str) -> AvailabilityResult:
        """Check whether a package name is free on the npm registry."""
        key = registry_key(name)
        if cached := await self._cached(key):
            return cached

        url = f"{self._registry_url}/{name}"
        try:
            response = await self._fetcher.fetch(url, max_attempts=self._max_attempts)
            payload = _json_or_none(response)
            if response.status_code != 404 and payload is None:
                raise ValueError(f"Invalid JSON from {url}")
        except (FetchError, httpx.HTTPError, ValueError) as e:
            return AvailabilityResult(
                platform=Platform.REGISTRY,
                status=Availability.UNKNOWN,
                error=str(e),
            )

        error = payload.get("error") if isinstance(payload, dict) else None
        if response.status_code == 404 or error:
            result = AvailabilityResult(
                platform=Platform.REGISTRY,
                status=Availability.AVAILABLE,
                message=str(error) if error else None,
            )
        else:
            result = AvailabilityResult(
                platform=Platform.REGISTRY,
                status=Availability.TAKEN,
                url=f"https://www.npmjs.com/package/{name}",
            )
        return await self._store(key, result)

    async def check_repo_host(self, name: str, owner: str | None) -> AvailabilityResult:
        """Check whether owner/name is free on GitHub."""
        if not owner:
            return AvailabilityResult(
                platform=Platform.REPO_HOST,
                status=Availability.UNKNOWN,
                error=MISSING_OWNER_ERROR,
                checked=False,
            )

        key = repo_host_key(owner, name)
        if cached := await self._cached(key):
            return cached

        url = f"{self._github_api_url}/repos/{owner}/{name}"
        try:
            response = await self._fetcher.fetch(
                url,
                headers={"User-Agent": USER_AGENT},
                max_attempts=self._max_attempts,
            )
        except (FetchError, httpx.HTTPError) as e:
            return AvailabilityResult(
                platform=Platform.REPO_HOST,
                status=Availability.UNKNOWN,
                error=str(e),
            )

        payload = _json_or_none(response)
        not_found = isinstance(payload, dict) and (
            str(payload.get("status")) == "404" and payload.get("message") == "Not Found"
        )
        if response.status_code == 404 or not_found:
            result = AvailabilityResult(
                platform=Platform.REPO_HOST,
                status=Availability.AVAILABLE,
                message=payload.get("message") if isinstance(payload, dict) else None,
            )
        else:
            result = AvailabilityResult(
                platform=Platform.REPO_HOST,
                status=Availability.TAKEN,
                url=f"https://github.com/{owner}/{name}",
            )
        return await self._store(key, result)

    # =========================================================================
    # Aggregate check and suggestions
    # =========================================================================

    async def check_all(self, name: str, owner: str | None = None) -> CheckReport:
        """
        Check a name on every platform concurrently.

        A failure on one platform never hides the other platform's result.
        """
        platforms = [Platform.REGISTRY, Platform.REPO_HOST]
        outcomes = await asyncio.gather(
            self.check_registry(name),
            self.check_repo_host(name, owner),
            return_exceptions=True,
        )

        results = []
        for platform, outcome in zip(platforms, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("%s check for %r failed: %s", platform.label, name, outcome)
                outcome = AvailabilityResult(
                    platform=platform,
                    status=Availability.UNKNOWN,
                    error=str(outcome) or type(outcome).__name__,
                )
            results.append(outcome)

        return CheckReport(name=name, results=results, owner=owner)

    async def _synonym_lookup(self, name: str):
        if self._synonyms is None:
            return None
        lookup = await self._synonyms.lookup(to_hyphen_case(name).split("-"))
        return lambda word: lookup.get(word, [])

    async def suggest(self, report: CheckReport) -> list[str]:
        """
        Find alternative names that are free on every checked platform.

        Only runs when the name is taken on at least one platform. Candidates
        are checked sequentially, candidate i after a delay of i * stagger.
        """
        if not report.is_taken_somewhere:
            return []

        candidates = generate_alternatives(
            report.name, synonyms=await self._synonym_lookup(report.name)
        )
        logger.debug("Checking %d alternatives for %r", len(candidates), report.name)

        suggestions: list[str] = []
        for i, candidate in enumerate(candidates):
            if len(suggestions) >= self._max_suggestions:
                break
            if i:
                await self._sleep(i * self._stagger)

            candidate_report = await self.check_all(candidate, report.owner)
            if candidate_report.fully_available:
                suggestions.append(candidate)

        return suggestions

    async def check_name(
        self,
        name: str,
        owner: str | None = None,
        suggest: bool = True,
    ) -> CheckReport:
        """Check a name everywhere and, if it is taken, suggest alternatives."""
        report = await self.check_all(name, owner)
        if suggest:
            report.suggestions = await self.suggest(report)
        return report
