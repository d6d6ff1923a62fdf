"""Protocol XML parser building the protocol model from expat events."""

from collections.abc import Callable
from xml.parsers import expat

from .properties import synthesize
from .types import (
    ARG_KINDS,
    Arg,
    ArgKind,
    ArgType,
    Entry,
    Enumeration,
    Interface,
    Message,
    Property,
    Protocol,
    make_type,
)

WAYLAND_NS = "http://wayland.freedesktop.org/protocol"
WAYLAND_CLIENT_NS = "http://wayland.freedesktop.org/protocol/client"

NS_SEPARATOR = "#"

CLIENT_CUSTOM = f"{WAYLAND_CLIENT_NS}{NS_SEPARATOR}custom"
CLIENT_GLOBAL = f"{WAYLAND_CLIENT_NS}{NS_SEPARATOR}global"


class ValidationError(RuntimeError):
    """Raised when the protocol document is structurally invalid."""

    def __init__(self, message: str, *, filename: str = "<stdin>", line: int | None = None):
        self.message = message
        self.filename = filename
        self.line = line
        if line is None:
            super().__init__(f"{filename}: {message}")
        else:
            super().__init__(f"{filename}:{line}: {message}")


def _local_name(name: str) -> str | None:
    """Strip the protocol namespace; elements of foreign namespaces yield None."""
    if NS_SEPARATOR not in name:
        return name
    namespace, local = name.rsplit(NS_SEPARATOR, 1)
    if namespace != WAYLAND_NS:
        return None
    return local


def _is_yes(attrs: dict[str, str], key: str) -> bool:
    return attrs.get(key) == "yes"


def _version(value: str | None) -> int:
    if value is None:
        return 0
    try:
        return int(value.strip())
    except ValueError:
        return 0


class ProtocolBuilder:
    """Build a Protocol from start/end/character-data events.

    The builder keeps the current interface, message and enumeration so that
    children attach to the right parent. The first structural error raises a
    ValidationError; there is no recovery.
    """

    def __init__(self, filename: str = "<stdin>", locator: Callable[[], int] | None = None):
        self.filename = filename
        self._locator = locator
        self.protocol: Protocol | None = None
        self._interface: Interface | None = None
        self._message: Message | None = None
        self._enumeration: Enumeration | None = None
        self._character_data: list[str] = []
        self._start_handlers: dict[str, Callable[[dict[str, str]], None]] = {
            "protocol": self._start_protocol,
            "interface": self._start_interface,
            "request": self._start_request,
            "event": self._start_event,
            "arg": self._start_arg,
            "enum": self._start_enum,
            "entry": self._start_entry,
            "property": self._start_property,
        }

    def fail(self, message: str) -> ValidationError:
        line = self._locator() if self._locator else None
        return ValidationError(message, filename=self.filename, line=line)

    def _resolve_type(self, type_name: str | None, interface_name: str | None) -> ArgType:
        if type_name is None:
            raise self.fail("unknown type")
        try:
            kind = ArgKind(type_name)
        except ValueError:
            raise self.fail("unknown type") from None
        if kind not in ARG_KINDS:
            raise self.fail("unknown type")
        if interface_name is None and kind in (ArgKind.OBJECT, ArgKind.NEW_ID):
            raise self.fail("no interface name given")
        return make_type(kind, interface_name)

    def _require_protocol(self, element: str) -> Protocol:
        if self.protocol is None:
            raise self.fail(f"{element} outside of protocol")
        return self.protocol

    def _require_interface(self, element: str) -> Interface:
        if self._interface is None:
            raise self.fail(f"{element} outside of interface")
        return self._interface

    def start_element(self, name: str, attrs: dict[str, str]) -> None:
        self._character_data = []

        element = _local_name(name)
        handler = self._start_handlers.get(element) if element else None
        if handler is not None:
            handler(attrs)

    def end_element(self, name: str) -> None:
        element = _local_name(name)
        if element == "copyright":
            self._require_protocol("copyright").copyright = "".join(self._character_data)
        elif element == "interface":
            self._interface = None
        elif element in ("request", "event"):
            self._message = None
        elif element == "enum":
            self._enumeration = None

    def character_data(self, data: str) -> None:
        self._character_data.append(data)

    def finish(self) -> Protocol:
        if self.protocol is None:
            raise self.fail("no protocol element found")
        return self.protocol

    def _start_protocol(self, attrs: dict[str, str]) -> None:
        name = attrs.get("name")
        if name is None:
            raise self.fail("no protocol name given")
        self.protocol = Protocol(name=name)

    def _start_interface(self, attrs: dict[str, str]) -> None:
        protocol = self._require_protocol("interface")
        name = attrs.get("name")
        if name is None:
            raise self.fail("no interface name given")

        version = _version(attrs.get("version"))
        if version <= 0:
            raise self.fail("no interface version given")

        interface = Interface(
            name=name,
            version=version,
            client_custom=_is_yes(attrs, CLIENT_CUSTOM),
            client_global=_is_yes(attrs, CLIENT_GLOBAL),
        )
        protocol.interfaces.append(interface)
        self._interface = interface

    def _start_message(self, attrs: dict[str, str], element: str) -> None:
        interface = self._require_interface(element)
        name = attrs.get("name")
        if name is None:
            raise self.fail(f"no {element} name given")

        message = Message(
            name=name,
            destructor=attrs.get("type") == "destructor",
            client_custom=_is_yes(attrs, CLIENT_CUSTOM),
        )
        if name == "destroy" and not message.destructor:
            raise self.fail("destroy request should be destructor type")

        if element == "request":
            interface.requests.append(message)
        else:
            interface.events.append(message)
        self._message = message

    def _start_request(self, attrs: dict[str, str]) -> None:
        self._start_message(attrs, "request")

    def _start_event(self, attrs: dict[str, str]) -> None:
        self._start_message(attrs, "event")

    def _start_arg(self, attrs: dict[str, str]) -> None:
        if self._message is None:
            raise self.fail("arg outside of request or event")
        name = attrs.get("name")
        if name is None:
            raise self.fail("no argument name given")

        arg_type = self._resolve_type(attrs.get("type"), attrs.get("interface"))
        self._message.args.append(Arg(name=name, type=arg_type))

    def _start_enum(self, attrs: dict[str, str]) -> None:
        interface = self._require_interface("enum")
        name = attrs.get("name")
        if name is None:
            raise self.fail("no enum name given")

        enumeration = Enumeration(name=name)
        interface.enums.append(enumeration)
        self._enumeration = enumeration

    def _start_entry(self, attrs: dict[str, str]) -> None:
        if self._enumeration is None:
            raise self.fail("entry outside of enum")
        name = attrs.get("name")
        if name is None:
            raise self.fail("no entry name given")
        value = attrs.get("value")
        if value is None:
            raise self.fail("no entry value given")

        self._enumeration.entries.append(Entry(name=name, value=value))

    def _start_property(self, attrs: dict[str, str]) -> None:
        interface = self._require_interface("property")
        name = attrs.get("name")
        if name is None:
            raise self.fail("no property name given")

        type_name = attrs.get("type")
        if type_name is None:
            raise self.fail("no property type given")
        if type_name == "flags":
            prop_type: ArgType = make_type(ArgKind.FLAGS)
        else:
            prop_type = self._resolve_type(type_name, attrs.get("interface"))

        prop = Property(
            name=name,
            type=prop_type,
            writable=_is_yes(attrs, "writable"),
            change_notify=_is_yes(attrs, "change-notify"),
        )
        interface.properties.append(prop)
        synthesize(interface, prop)


def parse(data: bytes | str, filename: str = "<stdin>") -> Protocol:
    """Parse a protocol XML document into the protocol model."""
    parser = expat.ParserCreate(namespace_separator=NS_SEPARATOR)
    builder = ProtocolBuilder(filename, locator=lambda: parser.CurrentLineNumber)

    parser.StartElementHandler = builder.start_element
    parser.EndElementHandler = builder.end_element
    parser.CharacterDataHandler = builder.character_data

    try:
        parser.Parse(data, True)
    except expat.ExpatError as err:
        raise ValidationError(
            expat.ErrorString(err.code), filename=filename, line=err.lineno
        ) from err

    return builder.finish()
