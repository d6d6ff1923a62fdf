"""Shared code generator: type table, message tables and interface descriptors."""

from io import StringIO

from .tables import TypeTable
from .types import Protocol
from .util import Sink, env, format_copyright, write_chunks

template = env.get_template("code.c.j2")


def stream(protocol: Protocol, table: TypeTable, sink: Sink) -> None:
    """Write the shared protocol code into ``sink``."""
    chunks = template.generate(
        protocol=protocol,
        table=table,
        rows=list(zip(protocol.interfaces, table.interfaces, strict=True)),
        copyright=format_copyright(protocol.copyright),
    )
    write_chunks(chunks, sink)


def render(protocol: Protocol, table: TypeTable) -> str:
    """Render the shared protocol code to a string."""
    out = StringIO()
    stream(protocol, table, out)
    return out.getvalue()
