"""
──────────────────────────────────────────────────────────────────────────────
inject_kernel.testing.fixtures
──────────────────────────────────────────────────────────────────────────────
Purpose:
    Provide reusable pytest fixtures for injector-based applications.

Exports:
    - injector   → a fresh Injector per test
    - override() → temporarily bind a value, restoring the old binding after

Usage in your test:
    pytest_plugins = ["inject_kernel.testing.fixtures"]

    def test_service(injector):
        injector.map(FakeRepo())
        with override(injector, "test-key", tag="api_key"):
            svc = injector.invoke(build_service)
──────────────────────────────────────────────────────────────────────────────
"""
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import pytest

from inject_kernel.di.registry import Injector, new
from inject_kernel.di.types import type_of


# ──────────────────────────────────────────────────────────────
# Injector Fixture (per test)
# ──────────────────────────────────────────────────────────────
@pytest.fixture()
def injector() -> Injector:
    """Provide an empty Injector using the default tag name."""
    return new()


# ──────────────────────────────────────────────────────────────
# Temporary bindings
# ──────────────────────────────────────────────────────────────
@contextmanager
def override(injector: Injector, value: Any, tag: Optional[str] = None) -> Iterator[Any]:
    """
    Bind `value` (by type, or by `tag` when given) for the duration of the
    block. Only this injector's own binding is replaced and restored; the
    parent chain is never touched.
    """
    table = injector._tag_map if tag is not None else injector._type_map
    key = tag if tag is not None else type_of(value)
    missing = key not in table
    previous = table.get(key)

    if tag is not None:
        injector.map_tag(value, tag)
    else:
        injector.map(value)
    try:
        yield value
    finally:
        if missing:
            del table[key]
        else:
            table[key] = previous
