"""
Alternative name generation.

Builds a bounded, deterministic list of substitute names for a package name
that is already taken.
"""

import logging
import re
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 30
MAX_SYNONYMS_PER_WORD = 3

COMMON_SUFFIXES = ["js", "ts", "api", "core", "lib", "kit", "pro", "plus"]
COMMON_PREFIXES = ["my", "super", "easy", "pro", "ultra"]
CONTEXT_WORDS = ["utils", "helper", "toolkit", "framework", "module"]

SynonymLookup = Callable[[str], Iterable[str]]

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def to_hyphen_case(name: str) -> str:
    """Convert camelCase and snake_case to lowercase hyphen-case."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower().replace("_", "-")


def _synonyms_for(word: str, synonyms: SynonymLookup) -> list[str]:
    try:
        found = list(synonyms(word) or [])[:MAX_SYNONYMS_PER_WORD]
        result = []
        for syn in found:
            syn = "-".join(str(syn).lower().split())
            if syn:
                result.append(syn)
        return result
    except Exception as e:
        logger.debug("Synonym lookup failed for %r: %s", word, e)
        return []


def generate_alternatives(
    name: str,
    synonyms: SynonymLookup | None = None,
) -> list[str]:
    """
    Generate alternative names for a package name.

    Args:
        name: The requested name (any case/separator style)
        synonyms: Optional lookup returning synonyms for a single word

    Returns:
        Up to 30 unique candidates in generation order, never including the
        normalized input.
    """
    normalized = to_hyphen_case(name)
    words = normalized.split("-")

    # dict keeps insertion order and gives set semantics
    alternatives: dict[str, None] = {}

    def add(candidate: str) -> None:
        alternatives.setdefault(candidate, None)

    for suffix in COMMON_SUFFIXES:
        add(f"{normalized}-{suffix}")

    for prefix in COMMON_PREFIXES:
        add(f"{prefix}-{normalized}")

    for word in CONTEXT_WORDS:
        add(f"{normalized}-{word}")

    # Separator variations
    add(normalized.replace("-", "_"))
    if len(words) > 1:
        add("".join(words))

    # Replace one word at a time to limit combinations
    if synonyms is not None:
        for i, word in enumerate(words):
            for syn in _synonyms_for(word, synonyms):
                new_words = list(words)
                new_words[i] = syn
                add("-".join(new_words))

    alternatives.pop(normalized, None)
    return list(alternatives)[:MAX_ALTERNATIVES]
