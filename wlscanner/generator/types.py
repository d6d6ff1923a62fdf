"""Type definitions for the protocol model."""

import string
from dataclasses import dataclass, field
from enum import StrEnum

from dataclasses_json import DataClassJsonMixin

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def upper(name: str) -> str:
    """Upper-case ASCII letters only, as used for generated symbol names."""
    return name.translate(_ASCII_UPPER)


class ArgKind(StrEnum):
    """Wire type of an argument or property."""

    INT = "int"
    UINT = "uint"
    STRING = "string"
    OBJECT = "object"
    NEW_ID = "new_id"
    ARRAY = "array"
    FLAGS = "flags"  # Property only, travels as two uint arguments
    FD = "fd"
    DOUBLE = "double"


REFERENCE_KINDS = frozenset([ArgKind.OBJECT, ArgKind.NEW_ID])

ARG_KINDS = frozenset(kind for kind in ArgKind if kind is not ArgKind.FLAGS)


@dataclass(frozen=True)
class ValueType(DataClassJsonMixin):
    """A type that carries no interface reference."""

    kind: ArgKind

    def __post_init__(self) -> None:
        if self.kind in REFERENCE_KINDS:
            raise ValueError(f"{self.kind} requires an interface name")

    @property
    def interface(self) -> None:
        return None


@dataclass(frozen=True)
class ReferenceType(DataClassJsonMixin):
    """An object or new_id type pointing at an interface by name.

    The interface is a symbolic reference; it may name an interface declared
    in another protocol document.
    """

    kind: ArgKind
    interface: str

    def __post_init__(self) -> None:
        if self.kind not in REFERENCE_KINDS:
            raise ValueError(f"{self.kind} cannot reference an interface")


ArgType = ValueType | ReferenceType


def make_type(kind: ArgKind, interface: str | None = None) -> ArgType:
    """Build the type variant for a kind, raising ValueError when inconsistent."""
    if kind in REFERENCE_KINDS:
        if interface is None:
            raise ValueError(f"{kind} requires an interface name")
        return ReferenceType(kind=kind, interface=interface)
    return ValueType(kind=kind)


@dataclass
class Arg(DataClassJsonMixin):
    """A single typed parameter of a message."""

    name: str
    type: ArgType


@dataclass
class Property(DataClassJsonMixin):
    """Server-held state that is synthesized into requests and events."""

    name: str
    type: ArgType
    writable: bool = False
    change_notify: bool = False

    @property
    def uppercase_name(self) -> str:
        return upper(self.name)

    @property
    def is_flags(self) -> bool:
        return self.type.kind is ArgKind.FLAGS

    @property
    def is_string(self) -> bool:
        return self.type.kind is ArgKind.STRING


@dataclass
class Message(DataClassJsonMixin):
    """A request or an event.

    Which list of the interface holds the message decides its direction, and
    its position in that list is its opcode.
    """

    name: str
    args: list[Arg] = field(default_factory=list)
    destructor: bool = False
    client_custom: bool = False
    origin: Property | None = None

    @property
    def uppercase_name(self) -> str:
        return upper(self.name)

    @property
    def arg_count(self) -> int:
        return len(self.args)

    @property
    def all_null(self) -> bool:
        """True when no argument needs an interface resolved."""
        return not any(arg.type.kind in REFERENCE_KINDS for arg in self.args)

    @property
    def new_id_arg(self) -> Arg | None:
        ret = None
        for arg in self.args:
            if arg.type.kind is ArgKind.NEW_ID:
                ret = arg
        return ret


@dataclass
class Entry(DataClassJsonMixin):
    """A single enumeration entry. The value is kept as written."""

    name: str
    value: str

    @property
    def uppercase_name(self) -> str:
        return upper(self.name)


@dataclass
class Enumeration(DataClassJsonMixin):
    """A named set of constants scoped to an interface."""

    name: str
    entries: list[Entry] = field(default_factory=list)

    @property
    def uppercase_name(self) -> str:
        return upper(self.name)


@dataclass
class Interface(DataClassJsonMixin):
    """A named, versioned protocol object type."""

    name: str
    version: int
    client_custom: bool = False
    client_global: bool = False
    requests: list[Message] = field(default_factory=list)
    events: list[Message] = field(default_factory=list)
    enums: list[Enumeration] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)

    @property
    def uppercase_name(self) -> str:
        return upper(self.name)

    @property
    def has_destructor(self) -> bool:
        return any(m.destructor for m in self.requests)

    @property
    def notify_properties(self) -> list[Property]:
        return [p for p in self.properties if p.change_notify]


@dataclass
class Protocol(DataClassJsonMixin):
    """Represents a complete protocol document."""

    name: str
    copyright: str | None = None
    interfaces: list[Interface] = field(default_factory=list)

    @property
    def uppercase_name(self) -> str:
        return upper(self.name)
