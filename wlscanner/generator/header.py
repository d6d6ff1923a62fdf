"""Client and server header generator."""

from io import StringIO

from .tables import TypeTable
from .types import ArgKind, Interface, Message, Protocol
from .util import Sink, c_type, env, format_copyright, indent, write_chunks

template = env.get_template("header.h.j2")


def _callback_params(interface: Interface, message: Message, *, server: bool) -> str:
    """Parameters of a listener or dispatch function pointer, one per line."""
    pad = indent(len(message.name) + 17)

    if server:
        params = ["struct wl_client *client", "struct wl_resource *resource"]
    else:
        params = ["void *data", f"struct {interface.name} *{interface.name}"]

    for arg in message.args:
        if server and arg.type.kind is ArgKind.OBJECT:
            params.append(f"struct wl_resource *{arg.name}")
        else:
            params.append(f"{c_type(arg.type)}{arg.name}")

    return f",\n{pad}".join(params)


def _stub_params(interface: Interface, message: Message) -> str:
    params = [f"struct {interface.name} *{interface.name}"]
    # The new_id argument becomes the return value
    params.extend(
        f"{c_type(arg.type)}{arg.name}"
        for arg in message.args
        if arg.type.kind is not ArgKind.NEW_ID
    )
    return ", ".join(params)


def _marshal_args(message: Message) -> str:
    return "".join(f", {arg.name}" for arg in message.args)


def stream(protocol: Protocol, table: TypeTable, sink: Sink, *, server: bool = False) -> None:
    """Write the client header, or the server header when ``server`` is set."""
    chunks = template.generate(
        protocol=protocol,
        rows=list(zip(protocol.interfaces, table.interfaces, strict=True)),
        server=server,
        side="SERVER" if server else "CLIENT",
        copyright=format_copyright(protocol.copyright),
        c_type=c_type,
        indent=indent,
        callback_params=lambda i, m: _callback_params(i, m, server=server),
        stub_params=_stub_params,
        marshal_args=_marshal_args,
    )
    write_chunks(chunks, sink)


def render(protocol: Protocol, table: TypeTable, *, server: bool = False) -> str:
    """Render a protocol header to a string."""
    out = StringIO()
    stream(protocol, table, out, server=server)
    return out.getvalue()
