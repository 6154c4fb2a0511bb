from __future__ import annotations
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TypeMapper(Protocol):
    """Stores values by type or tag and looks them up again."""

    def map(self, value: Any) -> "TypeMapper": ...

    def map_to(self, value: Any, interface: type) -> "TypeMapper": ...

    def map_tag(self, value: Any, tag: str) -> "TypeMapper": ...

    def get(self, type_: Any) -> Any: ...

    def get_tag(self, tag: str) -> Any: ...


@runtime_checkable
class FieldInjector(Protocol):
    """Populates the declared fields of an instance."""

    def apply(self, target: Any) -> None: ...

    def apply_tag(self, target: Any, tag: str) -> None: ...


@runtime_checkable
class Invoker(Protocol):
    """Calls functions with arguments looked up from the mapper."""

    def invoke(self, fn: Any) -> Any: ...

    def invoke_tag(self, *args: Any) -> Any: ...


@runtime_checkable
class Inject(TypeMapper, FieldInjector, Invoker, Protocol):
    """Everything an Injector offers."""
