"""Signature strings and the shared interface type table."""

from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin

from .types import REFERENCE_KINDS, ArgKind, Message, Protocol, upper

# Wire signature character per argument kind
SIGNATURE_CHARS: dict[ArgKind, str] = {
    ArgKind.INT: "i",
    ArgKind.UINT: "u",
    ArgKind.STRING: "s",
    ArgKind.OBJECT: "o",
    ArgKind.ARRAY: "a",
    ArgKind.FD: "h",
    ArgKind.DOUBLE: "d",
    ArgKind.NEW_ID: "n",
    ArgKind.FLAGS: "u",
}

# Untyped object references resolve to a NULL slot
UNTYPED_OBJECT = "wl_object"


def signature(message: Message) -> str:
    """Return the one-character-per-argument wire signature of a message."""
    return "".join(SIGNATURE_CHARS[arg.type.kind] for arg in message.args)


@dataclass(frozen=True)
class MessagePlan(DataClassJsonMixin):
    """Planned wire data for a single message."""

    name: str
    opcode: int
    signature: str
    type_index: int  # Offset into TypeTable.slots

    @property
    def uppercase_name(self) -> str:
        return upper(self.name)


@dataclass(frozen=True)
class InterfacePlan(DataClassJsonMixin):
    """Planned wire data for the requests and events of an interface."""

    name: str
    requests: tuple[MessagePlan, ...]
    events: tuple[MessagePlan, ...]


@dataclass(frozen=True)
class TypeTable(DataClassJsonMixin):
    """The flat interface type table shared by every message of a protocol.

    The first ``null_run_length`` slots are NULL and shared by every message
    without object or new_id arguments. Each remaining message owns one slot
    per argument. A slot is an interface name or None for NULL.
    """

    null_run_length: int
    slots: tuple[str | None, ...]
    externs: tuple[str, ...]
    interfaces: tuple[InterfacePlan, ...]

    @property
    def type_index(self) -> int:
        """Number of slots reserved after the shared null run."""
        return len(self.slots) - self.null_run_length

    def interface(self, name: str) -> InterfacePlan:
        for plan in self.interfaces:
            if plan.name == name:
                return plan
        raise KeyError(name)


class TablePlanner:
    """Plan signatures, opcodes and type table offsets for a protocol.

    Traversal order is interfaces in declaration order, and within each
    interface its requests then its events. The planner never touches the
    model; the result is returned as a TypeTable.
    """

    def __init__(self, protocol: Protocol):
        self.protocol = protocol

    def _messages(self) -> list[Message]:
        return [
            message
            for interface in self.protocol.interfaces
            for message in (*interface.requests, *interface.events)
        ]

    def calc_null_run_length(self) -> int:
        """Longest argument list among messages without interface references."""
        return max((m.arg_count for m in self._messages() if m.all_null), default=0)

    def calc_externs(self) -> tuple[str, ...]:
        """Distinct referenced interface names, in first-seen order."""
        names: dict[str, None] = {}
        for message in self._messages():
            for arg in message.args:
                interface = arg.type.interface
                if interface is not None and interface != UNTYPED_OBJECT:
                    names.setdefault(interface, None)
        return tuple(names)

    def _plan_messages(
        self, messages: list[Message], null_run_length: int, slots: list[str | None]
    ) -> tuple[MessagePlan, ...]:
        plans: list[MessagePlan] = []
        for opcode, message in enumerate(messages):
            if message.all_null:
                type_index = 0
            else:
                type_index = null_run_length + len(slots)
                for arg in message.args:
                    interface = arg.type.interface
                    if arg.type.kind in REFERENCE_KINDS and interface != UNTYPED_OBJECT:
                        slots.append(interface)
                    else:
                        slots.append(None)

            plans.append(
                MessagePlan(
                    name=message.name,
                    opcode=opcode,
                    signature=signature(message),
                    type_index=type_index,
                )
            )
        return tuple(plans)

    def plan(self) -> TypeTable:
        """Compute the complete type table."""
        null_run_length = self.calc_null_run_length()
        slots: list[str | None] = []
        interfaces: list[InterfacePlan] = []

        for interface in self.protocol.interfaces:
            requests = self._plan_messages(interface.requests, null_run_length, slots)
            events = self._plan_messages(interface.events, null_run_length, slots)
            interfaces.append(InterfacePlan(name=interface.name, requests=requests, events=events))

        return TypeTable(
            null_run_length=null_run_length,
            slots=(None,) * null_run_length + tuple(slots),
            externs=self.calc_externs(),
            interfaces=tuple(interfaces),
        )


def plan_tables(protocol: Protocol) -> TypeTable:
    """Plan the type table for a fully built protocol."""
    return TablePlanner(protocol).plan()
