"""Client implementation generator: proxy structs, constructors and property accessors."""

from io import StringIO

from .tables import TypeTable
from .types import Property, Protocol
from .util import Sink, c_type, env, format_copyright, write_chunks

template = env.get_template("client.c.j2")


def _notify_params(prop: Property) -> str:
    if prop.is_flags:
        return "uint32_t value, uint32_t change_mask"
    return f"{c_type(prop.type)}value"


def stream(protocol: Protocol, table: TypeTable, sink: Sink) -> None:
    """Write the client implementation into ``sink``.

    Interfaces marked ``client:custom`` are implemented by hand and produce
    no code here.
    """
    chunks = template.generate(
        protocol=protocol,
        table=table,
        interfaces=[i for i in protocol.interfaces if not i.client_custom],
        copyright=format_copyright(protocol.copyright),
        c_type=c_type,
        notify_params=_notify_params,
    )
    write_chunks(chunks, sink)


def render(protocol: Protocol, table: TypeTable) -> str:
    """Render the client implementation to a string."""
    out = StringIO()
    stream(protocol, table, out)
    return out.getvalue()
