"""Helpers shared by the C emitters."""

import typing
from collections.abc import Iterator

from jinja2 import Environment, PackageLoader

from .types import ArgKind, ArgType

env = Environment(
    loader=PackageLoader("wlscanner.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

_BLANK = " \t"

# C spelling per kind, always followed directly by the declarator
C_TYPE_MAP = {
    ArgKind.INT: "int32_t ",
    ArgKind.FD: "int32_t ",
    ArgKind.UINT: "uint32_t ",
    ArgKind.NEW_ID: "uint32_t ",
    ArgKind.FLAGS: "uint32_t ",
    ArgKind.DOUBLE: "double ",
    ArgKind.ARRAY: "struct wl_array *",
    ArgKind.OBJECT: "void *",
}


class Sink(typing.Protocol):
    """Anything accepting ordered text writes."""

    def write(self, text: str, /) -> object: ...


def c_type(t: ArgType, *, const: bool = True) -> str:
    """Map a wire type to its C spelling, ready to prefix a name."""
    if t.kind is ArgKind.STRING:
        return "const char *" if const else "char *"
    if t.kind is ArgKind.OBJECT and t.interface is not None:
        return f"struct {t.interface} *"
    return C_TYPE_MAP[t.kind]


def indent(n: int) -> str:
    """Whitespace reaching column ``n`` with 8-wide tabs."""
    return "\t" * (n // 8) + " " * (n % 8)


def format_copyright(copyright: str | None) -> str:
    """Render the copyright block as a C comment, one trimmed line per line.

    A blank last line is dropped; it is the indentation of the closing tag.
    """
    if copyright is None:
        return ""

    lines = copyright.split("\n")
    if lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return ""

    out = []
    for i, line in enumerate(lines):
        prefix = "/*" if i == 0 else " *"
        out.append(f"{prefix} {line.lstrip(_BLANK)}\n")
    out.append(" */\n\n")
    return "".join(out)


def write_chunks(chunks: Iterator[str], sink: Sink) -> None:
    for chunk in chunks:
        sink.write(chunk)
