#!/usr/bin/env python3
"""
Test suite for the availability cache

Usage:
    source .venv/bin/activate
    python test_cache.py
"""

import sys

# Check Python version and dependencies early
if sys.version_info < (3, 10):
    print("Error: Python 3.10+ required")
    sys.exit(1)

try:
    import anyio
except ImportError as e:
    print(f"Error: {e}")
    print()
    print("Activate the virtual environment first:")
    print("    source .venv/bin/activate")
    print("    python test_cache.py")
    sys.exit(1)

import json
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from package_names_mcp.cache import CacheStore

HOUR_MS = 60 * 60 * 1000


@dataclass
class TestResult:
    """Result of a single test."""

    __test__ = False

    name: str
    passed: bool
    message: str = ""


class TestRunner:
    """Runs tests and collects results."""

    __test__ = False

    def __init__(self):
        self.results: list[TestResult] = []
        self.current_section: str = ""

    def section(self, name: str):
        """Start a new test section."""
        self.current_section = name
        print(f"\n{'=' * 60}")
        print(f"  {name}")
        print(f"{'=' * 60}")

    def test(self, name: str, condition: bool, message: str = ""):
        """Record a test result."""
        result = TestResult(
            name=f"{self.current_section}: {name}", passed=condition, message=message
        )
        self.results.append(result)

        if condition:
            print(f"  ✓ {name}")
        else:
            print(f"  ✗ {name}")
            if message:
                print(f"    → {message}")

    def summary(self) -> bool:
        """Print summary and return True if all tests passed."""
        passed = sum(1 for r in self.results if r.passed)
        failed = sum(1 for r in self.results if not r.passed)
        total = len(self.results)

        print(f"\n{'=' * 60}")
        print(f"  SUMMARY: {passed}/{total} passed, {failed} failed")
        print(f"{'=' * 60}")

        if failed > 0:
            print("\nFailed tests:")
            for r in self.results:
                if not r.passed:
                    print(f"  ✗ {r.name}")
                    if r.message:
                        print(f"    → {r.message}")

        return failed == 0


def age_entry(path: Path, key: str, age_ms: int):
    """Rewrite an entry's timestamp so it looks age_ms old."""
    raw = json.loads(path.read_text())
    raw[key]["timestamp"] = int(time.time() * 1000) - age_ms
    path.write_text(json.dumps(raw, indent=2))


async def run_cache_tests(runner: TestRunner, tmp: Path):
    runner.section("get / set")

    path = tmp / "nested" / "dir" / "cache.json"
    cache = CacheStore(path)

    result = await cache.get("missing", HOUR_MS)
    runner.test("missing key returns None", result is None)
    runner.test("cache directory created on first use", path.parent.is_dir())

    await cache.set("registry:left-pad", {"available": True, "platform": "registry"})
    runner.test("set persists file immediately", path.exists())

    data = await cache.get("registry:left-pad", HOUR_MS)
    runner.test(
        "stored entry is returned",
        data == {"available": True, "platform": "registry"},
        f"got {data}",
    )

    data = await cache.get("registry:left-pad", 1000)
    runner.test("short ttl still returns a fresh entry", data is not None, f"got {data}")

    raw = json.loads(path.read_text())
    entry = raw.get("registry:left-pad", {})
    runner.test(
        "file holds {timestamp, data}",
        isinstance(entry.get("timestamp"), int) and "data" in entry,
        f"got {entry}",
    )

    await cache.set("registry:left-pad", {"available": False, "platform": "registry"})
    data = await cache.get("registry:left-pad", HOUR_MS)
    runner.test("set overwrites existing entry", data["available"] is False, f"got {data}")

    runner.section("TTL expiry")

    await cache.set("expired-key", {"available": True})
    age_entry(path, "expired-key", 2 * HOUR_MS)

    data = await cache.get("expired-key", HOUR_MS)
    runner.test("entry older than ttl is absent", data is None, f"got {data}")

    data = await cache.get("expired-key", 3 * HOUR_MS)
    runner.test("stale entry is kept for a larger ttl", data == {"available": True}, f"got {data}")

    entries = await cache.list()
    runner.test("list includes expired entries", "expired-key" in entries)
    runner.test(
        "list returns every key",
        set(entries) == {"registry:left-pad", "expired-key"},
        f"got {sorted(entries)}",
    )

    runner.section("clear")

    await cache.clear()
    entries = await cache.list()
    runner.test("list after clear is empty", entries == {}, f"got {entries}")
    runner.test("cache file removed", not path.exists())

    await cache.clear()
    runner.test("clearing an empty cache is fine", await cache.list() == {})

    runner.section("corrupt files")

    path.write_text("{not json")
    runner.test("corrupt file reads as empty", await cache.list() == {})
    runner.test("corrupt file get returns None", await cache.get("x", HOUR_MS) is None)

    await cache.set("after-corruption", 1)
    entries = await cache.list()
    runner.test("set recovers from corrupt file", list(entries) == ["after-corruption"], f"got {entries}")

    path.write_text("[1, 2, 3]")
    runner.test("non-object JSON reads as empty", await cache.list() == {})

    path.write_text(json.dumps({"weird": "not-an-entry"}))
    runner.test("malformed entry get returns None", await cache.get("weird", HOUR_MS) is None)

    path.write_text(json.dumps({"bad-ts": {"timestamp": "soon", "data": 1}}))
    runner.test("non-numeric timestamp get returns None", await cache.get("bad-ts", HOUR_MS) is None)

    blocker = tmp / "not-a-dir"
    blocker.write_text("plain file")
    blocked = CacheStore(blocker / "cache.json")
    runner.test("unusable cache directory lists empty", await blocked.list() == {})
    runner.test("unusable cache directory get returns None", await blocked.get("x", HOUR_MS) is None)

    runner.section("isolation")

    other = CacheStore(tmp / "other.json")
    await other.set("only-here", True)
    runner.test("separate paths do not share entries", await cache.get("only-here", HOUR_MS) is None)
    runner.test("path property exposes location", other.path == tmp / "other.json")


async def main_async() -> bool:
    runner = TestRunner()

    print("\n" + "=" * 60)
    print("  CACHE STORE - TEST SUITE")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        await run_cache_tests(runner, Path(tmp))

    return runner.summary()


def test_suite():
    """Entry point for pytest."""
    assert anyio.run(main_async)


def main():
    result = anyio.run(main_async)
    sys.exit(0 if result else 1)


if __name__ == "__main__":
    main()
