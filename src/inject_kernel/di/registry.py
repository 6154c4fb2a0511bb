from __future__ import annotations
import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from .errors import InjectContractError, NotFoundError
from .inject import apply_fields, invoke_with
from .types import DEFAULT_TAG, implements, is_interface, key_of, type_of

if TYPE_CHECKING:
    from inject_kernel.config.settings import InjectSettings

"""
──────────────────────────────────────────────────────────────────────────────
Injector Registry
──────────────────────────────────────────────────────────────────────────────
Purpose:
    Hold values keyed by type and by tag, and hand them out again to
    instance fields and function parameters.

APIs:
    - map(value) / map_to(value, Interface) / map_tag(value, tag)
    - get(type) / get_tag(tag)             → value, or NotFoundError
    - apply(obj) / apply_tag(obj, tag)     → fills declared fields
    - invoke(fn) / invoke_tag(*tags, fn)   → calls fn with resolved args
    - set_parent(injector)                 → fallback for lookup misses

Lookup order for get(T):
    exact key → first concrete binding implementing T (interfaces only)
    → parent.get(T) → NotFoundError

Not thread-safe. Re-registering a key replaces the previous value.

Usage:
    injector = new()
    injector.map("Ciel").map_tag("123456", "password")
    injector.get(str)              # "Ciel"

    def greet(name: str) -> str:
        return f"hi {name}"

    injector.invoke(greet)         # "hi Ciel"
"""

logger = logging.getLogger(__name__)

_MISSING = object()


class Injector:
    """Type and tag registry with parent fallback."""

    def __init__(
        self,
        tag: str = DEFAULT_TAG,
        *,
        parent: Optional["Injector"] = None,
        tag_required: bool = False,
    ):
        self.tag = tag
        self.tag_required = tag_required
        self.parent = parent
        self._type_map: Dict[Any, Any] = {}
        self._tag_map: Dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings: Optional["InjectSettings"] = None) -> "Injector":
        """Build an injector from InjectSettings (read from the environment if omitted)."""
        from inject_kernel.config.settings import InjectSettings

        settings = settings or InjectSettings()
        return cls(settings.tag, tag_required=settings.tag_required)

    def __repr__(self) -> str:
        return (
            f"<Injector tag={self.tag!r} types={len(self._type_map)} "
            f"tags={len(self._tag_map)} parent={'yes' if self.parent else 'no'}>"
        )

    def set_parent(self, parent: Optional["Injector"]) -> "Injector":
        """Use `parent` for lookups that miss here. Parent cycles are not detected."""
        self.parent = parent
        return self

    # ──────────────────────────────────────────────
    # Registration
    # ──────────────────────────────────────────────
    def map(self, value: Any) -> "Injector":
        key = type_of(value)
        logger.debug("map %s", key.__qualname__)
        self._type_map[key] = value
        return self

    def map_to(self, value: Any, interface: type) -> "Injector":
        """Bind `value` under an interface (Protocol or abstract ABC) instead of its own type."""
        if not is_interface(interface):
            raise InjectContractError(
                f"map_to() expects a Protocol or abstract base class, got {interface!r}"
            )
        logger.debug("map_to %s", interface.__qualname__)
        self._type_map[interface] = value
        return self

    def map_tag(self, value: Any, tag: str) -> "Injector":
        logger.debug("map_tag %r", tag)
        self._tag_map[tag] = value
        return self

    # ──────────────────────────────────────────────
    # Resolution
    # ──────────────────────────────────────────────
    def _find(self, key: Any) -> Any:
        if key in self._type_map:
            return self._type_map[key]
        if is_interface(key):
            for bound, value in self._type_map.items():
                if implements(bound, key):
                    return value
        if self.parent is not None:
            return self.parent._find(key)
        return _MISSING

    def _find_tag(self, tag: str) -> Any:
        if tag in self._tag_map:
            return self._tag_map[tag]
        if self.parent is not None:
            return self.parent._find_tag(tag)
        return _MISSING

    def get(self, type_: Any) -> Any:
        key = key_of(type_)
        value = self._find(key)
        if value is _MISSING:
            logger.debug("get miss for %r", key)
            raise NotFoundError(key)
        return value

    def get_tag(self, tag: str) -> Any:
        value = self._find_tag(tag)
        if value is _MISSING:
            logger.debug("get_tag miss for %r", tag)
            raise NotFoundError(tag, by_tag=True)
        return value

    def has(self, type_: Any) -> bool:
        return self._find(key_of(type_)) is not _MISSING

    def has_tag(self, tag: str) -> bool:
        return self._find_tag(tag) is not _MISSING

    # ──────────────────────────────────────────────
    # Field population
    # ──────────────────────────────────────────────
    def apply(self, target: Any) -> None:
        """Fill the declared fields of `target` using this injector's tag name."""
        self.apply_tag(target, self.tag)

    def apply_tag(self, target: Any, tag: str) -> None:
        apply_fields(self, target, tag, tag_required=self.tag_required)

    inject = apply
    inject_tag = apply_tag

    # ──────────────────────────────────────────────
    # Invocation
    # ──────────────────────────────────────────────
    def invoke(self, fn: Any) -> Any:
        """Call `fn` with every parameter resolved by its declared type."""
        return invoke_with(self, fn)

    def invoke_tag(self, *args: Any) -> Any:
        """
        invoke_tag(tag1, tag2, ..., fn)

        The first len(tags) parameters are resolved by tag, the rest by type.
        Tags beyond the parameter count are dropped. With no arguments this
        returns None.
        """
        if not args:
            return None
        *tags, fn = args
        return invoke_with(self, fn, tags)


def new() -> Injector:
    """Create an Injector using the "inject" tag name."""
    return Injector(DEFAULT_TAG)


def new_tag(tag: str) -> Injector:
    """Create an Injector that honours `tag` annotations instead of "inject"."""
    return Injector(tag)
