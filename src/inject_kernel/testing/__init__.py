"""
Testing utilities for inject_kernel apps.
──────────────────────────────────────────────────────────────
Provides pytest fixtures and helpers to swap bindings inside a test.
Needs pytest: install with the `testing` extra (inject-kernel[testing]).
──────────────────────────────────────────────────────────────
"""
from .fixtures import injector, override

__all__ = ["injector", "override"]
