"""Property synthesis: turn declared properties into wire messages."""

from .types import Arg, ArgKind, Interface, Message, Property, make_type


def _value_args(prop: Property) -> list[Arg]:
    if prop.is_flags:
        # Order matters, the wire signature is positional
        return [
            Arg(name="value", type=make_type(ArgKind.UINT)),
            Arg(name="change_mask", type=make_type(ArgKind.UINT)),
        ]
    return [Arg(name="value", type=prop.type)]


def synthesize(interface: Interface, prop: Property) -> list[Message]:
    """Append the setter request and the notify event derived from a property.

    A writable property yields ``set_<name>`` at the end of the requests, a
    change-notified one yields ``<name>_notify`` at the end of the events.
    Returns the synthesized messages in the order they were appended.
    """
    created: list[Message] = []

    if prop.writable:
        setter = Message(name=f"set_{prop.name}", args=_value_args(prop), origin=prop)
        interface.requests.append(setter)
        created.append(setter)

    if prop.change_notify:
        notify = Message(name=f"{prop.name}_notify", args=_value_args(prop), origin=prop)
        interface.events.append(notify)
        created.append(notify)

    return created
