# inject_kernel/di/errors.py
"""
Injector error taxonomy
──────────────────────────────────────────────
• NotFoundError        → no binding for a type key or tag (recoverable)
• InjectContractError  → caller broke a hard precondition (programming error)

Errors raised by an invoked callable are never wrapped; they reach the
caller of invoke()/invoke_tag() unchanged.
──────────────────────────────────────────────
"""
from __future__ import annotations
from typing import Any


class InjectError(RuntimeError):
    """Base class for every error raised by the injector."""


class NotFoundError(InjectError):
    """No binding for `key` in the injector or any of its parents."""

    def __init__(self, key: Any, *, by_tag: bool = False):
        self.key = key
        self.by_tag = by_tag
        if by_tag:
            msg = f"No value registered for tag {key!r}"
        else:
            msg = f"No value registered for type {describe_key(key)}"
        super().__init__(msg)


class InjectContractError(InjectError, TypeError):
    """Raised on misuse: the argument can never be valid for the call."""


def describe_key(key: Any) -> str:
    if isinstance(key, type):
        return f"{key.__module__}.{key.__qualname__}"
    return repr(key)
