from __future__ import annotations
import dataclasses
import inspect
import types
from abc import ABCMeta
from dataclasses import dataclass
from functools import lru_cache
from typing import (
    Annotated, Any, ClassVar, Dict, Iterator, Optional, Tuple, Union,
    get_args, get_origin, get_type_hints,
)

"""
──────────────────────────────────────────────────────────────────────────────
Type keys, interfaces and field metadata
──────────────────────────────────────────────────────────────────────────────
Purpose:
    Turn runtime types and annotations into the keys the injector stores
    bindings under, and describe which fields of a class can be injected.

Type keys:
    key_of(Optional[Foo]) is key_of(Annotated[Foo, ...]) is Foo
    type_of(foo) is Foo

Interfaces:
    typing.Protocol classes and abstract ABCs. A Protocol is satisfied
    structurally, an ABC through issubclass() (virtual subclasses included).

Field tags:
    class User:
        name: str                                   # resolved by type
        password: Annotated[str, Tag("password")]   # resolved by tag
        token: Annotated[str, Tag()]                # bare marker → by type

    @dataclass
    class Session:
        user: str = field(default="", metadata={"inject": "user"})
"""

DEFAULT_TAG = "inject"

_NONE_TYPE = type(None)
_MISSING = object()


@dataclass(frozen=True)
class Tag:
    """
    Field annotation marker, the analogue of a `<name>:"<value>"` struct tag.

    `Tag()` with no value is the bare marker: the field is annotated for
    injection but still resolved by its declared type.
    """

    value: Optional[str] = None
    name: str = DEFAULT_TAG


# ──────────────────────────────────────────────
# Type keys
# ──────────────────────────────────────────────
def _unwrap_annotated(typ: Any) -> Any:
    if get_origin(typ) is Annotated:
        return get_args(typ)[0]
    return typ


def _unwrap_optional(typ: Any) -> Any:
    origin = get_origin(typ)
    if origin is Union or origin is types.UnionType:
        args = get_args(typ)
        rest = [a for a in args if a is not _NONE_TYPE]
        if len(args) == 2 and len(rest) == 1:
            return rest[0]
    return typ


def key_of(annotation: Any) -> Any:
    """Normalize a type or annotation into the key bindings are stored under."""
    typ = _unwrap_annotated(annotation)
    typ = _unwrap_optional(typ)
    return _unwrap_annotated(typ)


def type_of(value: Any) -> type:
    """Return the type key for a value."""
    return type(value)


# ──────────────────────────────────────────────
# Interfaces
# ──────────────────────────────────────────────
def _is_protocol(typ: Any) -> bool:
    return isinstance(typ, type) and bool(getattr(typ, "_is_protocol", False))


def is_interface(typ: Any) -> bool:
    """True for Protocol classes and ABCs that still have abstract members."""
    if not isinstance(typ, type):
        return False
    if _is_protocol(typ):
        return True
    return isinstance(typ, ABCMeta) and inspect.isabstract(typ)


def protocol_members(proto: type) -> frozenset:
    names = set()
    for base in proto.__mro__:
        if not _is_protocol(base):
            continue
        names.update(n for n in vars(base) if not n.startswith("_"))
        names.update(n for n in inspect.get_annotations(base) if not n.startswith("_"))
    return frozenset(names)


def _has_member(cls: type, name: str) -> bool:
    if hasattr(cls, name):
        return True
    return any(name in inspect.get_annotations(k) for k in cls.__mro__)


def implements(cls: Any, iface: type) -> bool:
    """Whether the concrete class `cls` satisfies the interface `iface`."""
    if not isinstance(cls, type) or is_interface(cls):
        return False
    if _is_protocol(iface):
        if iface in cls.__mro__:
            return True
        return all(_has_member(cls, m) for m in protocol_members(iface))
    return issubclass(cls, iface)


# ──────────────────────────────────────────────
# Field metadata table
# ──────────────────────────────────────────────
@dataclass(frozen=True)
class FieldSpec:
    """One injectable field: its name, declared type key and tag values."""

    name: str
    type_: Any
    tags: Tuple[Tuple[str, Optional[str]], ...] = ()

    def tag(self, name: str) -> Tuple[bool, Optional[str]]:
        """Return (annotated, value) for the tag called `name`."""
        for tag_name, value in self.tags:
            if tag_name == name:
                return True, value or None
        return False, None


def _annotated_tags(annotation: Any) -> Iterator[Tag]:
    # Annotated may sit outside or inside an Optional
    for typ in (annotation, _unwrap_optional(_unwrap_annotated(annotation))):
        if get_origin(typ) is Annotated:
            for meta in get_args(typ)[1:]:
                if isinstance(meta, Tag):
                    yield meta


def _metadata_tags(metadata: Any) -> Iterator[Tuple[str, Optional[str]]]:
    for name, value in metadata.items():
        if isinstance(name, str) and (value is None or isinstance(value, str)):
            yield name, value


def _is_classvar(annotation: Any) -> bool:
    typ = _unwrap_annotated(annotation)
    return typ is ClassVar or get_origin(typ) is ClassVar


def _class_attr(cls: type, name: str) -> Any:
    for k in cls.__mro__:
        if name in vars(k):
            return vars(k)[name]
    return _MISSING


def _has_instance_dict(cls: type) -> bool:
    return any("__dict__" in vars(k) for k in cls.__mro__)


def _settable(cls: type, name: str) -> bool:
    """Whether `instance.name = value` can succeed, like reflect's CanSet."""
    attr = _class_attr(cls, name)
    if isinstance(attr, property):
        return attr.fset is not None
    kind = type(attr)
    if attr is not _MISSING and (hasattr(kind, "__set__") or hasattr(kind, "__delete__")):
        return hasattr(kind, "__set__")
    return _has_instance_dict(cls)


def _is_named_tuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


@lru_cache(maxsize=None)
def fields_of(cls: type) -> Tuple[FieldSpec, ...]:
    """
    Build the injectable-field table for `cls`, base classes first.

    Private names (leading underscore), ClassVars and attributes that cannot
    be assigned (read-only properties, names missing from __slots__) are not
    fields. Frozen dataclasses and named tuples have none at all.
    """
    if _is_named_tuple(cls):
        return ()
    dc_fields: Dict[str, Any] = {}
    if dataclasses.is_dataclass(cls):
        if cls.__dataclass_params__.frozen:
            return ()
        dc_fields = {f.name: f for f in dataclasses.fields(cls)}
        pseudo = set(cls.__dataclass_fields__) - set(dc_fields)  # ClassVar / InitVar
    else:
        pseudo = set()

    hints: Dict[str, Any] = get_type_hints(cls, include_extras=True)
    specs = []
    for name, annotation in hints.items():
        if name.startswith("_") or name in pseudo or _is_classvar(annotation):
            continue
        if not _settable(cls, name):
            continue
        tags = [(t.name, t.value) for t in _annotated_tags(annotation)]
        if name in dc_fields:
            tags.extend(_metadata_tags(dc_fields[name].metadata))
        specs.append(FieldSpec(name, key_of(annotation), tuple(tags)))
    return tuple(specs)


def is_struct_like(target: Any) -> bool:
    """Instances with declared fields; classes and modules never are."""
    if isinstance(target, (type, types.ModuleType)):
        return False
    return bool(fields_of(type(target)))
