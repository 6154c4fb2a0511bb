# inject_kernel/fastapi.py (framework)
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from inject_kernel.di.errors import NotFoundError, describe_key
from inject_kernel.di.registry import Injector

"""
──────────────────────────────────────────────────────────────
inject_kernel.fastapi
──────────────────────────────────────────────────────────────
Purpose:
    Make an Injector available to FastAPI routes.

Usage:
    app = FastAPI()
    injector = new().map(UsersRepo()).map_tag("s3cr3t", "api_key")
    install(app, injector)

    @app.get("/users")
    def list_users(repo: UsersRepo = Depends(provide(UsersRepo)),
                   key: str = Depends(provide_tag("api_key"))):
        ...

A missing binding becomes a 500 response with the kernel error envelope.
──────────────────────────────────────────────────────────────
"""

logger = logging.getLogger(__name__)


def error_envelope(code: str, message: str, details: Optional[Dict[str, Any]] = None):
    return {"error": {"code": code, "message": message, "details": details or {}}}


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    key = exc.key if exc.by_tag else describe_key(exc.key)
    return JSONResponse(
        error_envelope("DEPENDENCY_NOT_FOUND", str(exc), {"key": key, "by_tag": exc.by_tag}),
        status_code=500,
    )


def install(app: FastAPI, injector: Injector) -> None:
    """Attach `injector` to app.state and map NotFoundError to a JSON error."""
    app.state.injector = injector
    app.add_exception_handler(NotFoundError, not_found_handler)
    logger.info("[kernel] Injector installed on '%s'", app.title)


def get_injector(request: Request) -> Injector:
    """Return the Injector installed on the request's app."""
    injector: Injector | None = getattr(request.app.state, "injector", None)
    if injector is None:
        raise RuntimeError("No Injector installed. Did you call install(app, injector)?")
    return injector


def provide(type_: Any) -> Callable[[Request], Any]:
    """
    Dependency resolving `type_` from the installed Injector.

    Usage:
        repo: UsersRepo = Depends(provide(UsersRepo))
    """

    def _provide(request: Request) -> Any:
        return get_injector(request).get(type_)

    return _provide


def provide_tag(tag: str) -> Callable[[Request], Any]:
    """Dependency resolving the value bound to `tag`."""

    def _provide_tag(request: Request) -> Any:
        return get_injector(request).get_tag(tag)

    return _provide_tag
