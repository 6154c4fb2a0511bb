from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Annotated, ClassVar, NamedTuple, Optional, Protocol, Union

from inject_kernel.di.types import (
    FieldSpec, Tag, fields_of, implements, is_interface, is_struct_like, key_of, type_of,
)


class Greeter(Protocol):
    def greet(self) -> str: ...


class Named(Protocol):
    name: str


class English:
    def greet(self) -> str:
        return "hello"


@dataclass
class Person:
    name: str


class Store(ABC):
    @abstractmethod
    def save(self, item) -> None: ...


class MemoryStore(Store):
    def save(self, item) -> None:
        pass


class Sink(ABC):
    @abstractmethod
    def write(self, data) -> None: ...


class FileSink:
    def write(self, data) -> None:
        pass


Sink.register(FileSink)


class Base:
    a: str


class Child(Base):
    b: Annotated[int, Tag("num")]
    counter: ClassVar[int] = 0
    _private: str


@dataclass(frozen=True)
class Frozen:
    value: str = "x"


@dataclass
class Tagged:
    password: str = field(default="", metadata={"inject": "password"})
    bare: str = field(default="", metadata={"inject": None})
    empty: str = field(default="", metadata={"inject": ""})


def test_type_of_returns_runtime_type():
    assert type_of("hi") is str
    assert type_of(English()) is English


def test_key_of_unwraps_optional_and_annotated():
    assert key_of(Optional[str]) is key_of(str)
    assert key_of(Union[None, str]) is str
    assert key_of(str | None) is str
    assert key_of(Annotated[str, Tag("x")]) is str
    assert key_of(Optional[Annotated[str, Tag("x")]]) is str


def test_key_of_keeps_real_unions():
    assert key_of(Union[int, str]) == Union[int, str]


def test_interfaces():
    assert is_interface(Greeter)
    assert is_interface(Store)
    assert not is_interface(MemoryStore)
    assert not is_interface(English)
    assert not is_interface(str)
    assert not is_interface(Optional[str])


def test_protocol_is_structural():
    assert implements(English, Greeter)
    assert not implements(str, Greeter)
    assert implements(Person, Named)


def test_abc_uses_subclassing_and_virtual_registration():
    assert implements(MemoryStore, Store)
    assert implements(FileSink, Sink)
    assert not implements(English, Store)


def test_interface_never_implements_interface():
    assert not implements(Store, Store)


def test_fields_of_lists_bases_first_and_skips_classvars_and_private():
    specs = fields_of(Child)
    assert [s.name for s in specs] == ["a", "b"]
    assert specs[1] == FieldSpec("b", int, (("inject", "num"),))


def test_fields_of_reads_dataclass_metadata():
    specs = {s.name: s for s in fields_of(Tagged)}
    assert specs["password"].tag("inject") == (True, "password")
    assert specs["bare"].tag("inject") == (True, None)
    assert specs["empty"].tag("inject") == (True, None)
    assert specs["password"].tag("other") == (False, None)


def test_frozen_dataclass_has_no_settable_fields():
    assert fields_of(Frozen) == ()
    assert not is_struct_like(Frozen())


def test_struct_like():
    assert is_struct_like(Child())
    assert is_struct_like(Person("x"))
    assert not is_struct_like(Child)
    assert not is_struct_like(42)
    assert not is_struct_like({"a": 1})


class Pair(NamedTuple):
    left: str
    right: str


class ReadOnly:
    name: str
    size: int

    @property
    def size(self) -> int:
        return 1


@dataclass
class Record:
    name: str = ""
    secret: str = field(default="", metadata={"inject": "secret"})


class Extended(Record):
    count: int


def test_named_tuples_have_no_settable_fields():
    assert fields_of(Pair) == ()
    assert not is_struct_like(Pair("a", "b"))


def test_read_only_properties_are_not_fields():
    assert [s.name for s in fields_of(ReadOnly)] == ["name"]


def test_dataclass_subclass_keeps_its_own_fields():
    specs = fields_of(Extended)
    assert [s.name for s in specs] == ["name", "secret", "count"]
    assert specs[1].tag("inject") == (True, "secret")
    assert specs[2] == FieldSpec("count", int, ())
