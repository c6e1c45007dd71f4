"""
Synonym lookup via the Datamuse API.

Results are cached per word ("synonyms:<word>") in the same cache store as
availability results. Lookups never fail: any error yields no synonyms.
"""

import logging
from collections.abc import Iterable

import httpx

from .cache import CacheStore
from .config import DATAMUSE_API_URL
from .fetcher import FetchError, RateLimitedFetcher

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10


class DatamuseSynonyms:
    """Fetches and caches synonyms for single words."""

    def __init__(
        self,
        fetcher: RateLimitedFetcher,
        cache: CacheStore,
        ttl: int,
        api_url: str = DATAMUSE_API_URL,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._ttl = ttl
        self._api_url = api_url
        self._max_results = max_results

    async def _lookup_word(self, word: str) -> list[str]:
        key = f"synonyms:{word}"
        cached = await self._cache.get(key, self._ttl)
        if isinstance(cached, list):
            return cached

        url = str(httpx.URL(self._api_url, params={"rel_syn": word, "max": self._max_results}))
        try:
            response = await self._fetcher.fetch(url)
            data = response.json() if response.status_code == 200 else []
        except (FetchError, httpx.HTTPError, ValueError) as e:
            logger.debug("Synonym lookup for %r failed: %s", word, e)
            return []

        words = [
            item["word"]
            for item in data
            if isinstance(item, dict) and isinstance(item.get("word"), str)
        ] if isinstance(data, list) else []

        await self._cache.set(key, words)
        return words

    async def lookup(self, words: Iterable[str]) -> dict[str, list[str]]:
        """
        Look up synonyms for each word.

        Returns:
            Mapping of word -> synonyms (empty list when none were found)
        """
        result: dict[str, list[str]] = {}
        for word in words:
            if word and word not in result:
                result[word] = await self._lookup_word(word)
        return result
