# inject_kernel/__init__.py
"""
inject_kernel
──────────────────────────────────────────────────────────────
A small type/tag registry for dependency injection.
Provides:
    - Type and tag bindings with parent fallback
    - Interface lookup (Protocols, abstract ABCs)
    - Field population driven by annotations / Tag markers
    - Function invocation with resolved arguments
    - Optional FastAPI integration (inject_kernel.fastapi)
──────────────────────────────────────────────────────────────
"""
import logging

__version__ = "0.2.0"

from inject_kernel.di.errors import InjectContractError, InjectError, NotFoundError
from inject_kernel.di.registry import Injector, new, new_tag
from inject_kernel.di.types import DEFAULT_TAG, Tag, key_of, type_of

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_TAG",
    "Injector",
    "InjectContractError",
    "InjectError",
    "NotFoundError",
    "Tag",
    "key_of",
    "new",
    "new_tag",
    "type_of",
]
