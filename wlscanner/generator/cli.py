"""Command-line interface for wlscanner code generation."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from functools import partial
from typing import IO, TYPE_CHECKING, NoReturn

import click
from rich.console import Console
from rich.table import Table

from wlscanner.generator import client, code, header, parse, plan_tables
from wlscanner.generator.parser import ValidationError

if TYPE_CHECKING:
    from wlscanner.generator.tables import InterfacePlan, TypeTable
    from wlscanner.generator.types import Protocol
    from wlscanner.generator.util import Sink

MODES: dict[str, Callable[[Protocol, TypeTable, Sink], None]] = {
    "client-header": partial(header.stream, server=False),
    "server-header": partial(header.stream, server=True),
    "shared-code": code.stream,
    "code": code.stream,  # Historical name of shared-code
    "client-code": client.stream,
}

err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def _fail(message: str) -> NoReturn:
    err_console.print(message, markup=False)
    sys.exit(1)


def _load(input_file: IO[bytes]) -> Protocol:
    """Read and parse the whole input document before anything is emitted."""
    filename = str(getattr(input_file, "name", "<stdin>"))
    try:
        data = input_file.read()
    except OSError as err:
        _fail(f"{filename}: read failed: {err.strerror or err}")

    try:
        return parse(data, filename=filename)
    except ValidationError as err:
        _fail(str(err))


@click.group()
def cli() -> None:
    """Wayland protocol scanner."""


@cli.command()
@click.argument("mode", type=click.Choice(list(MODES)))
@click.option(
    "--input", "-i", "input_file", type=click.File("rb"), default="-", help="Protocol XML file"
)
@click.option(
    "--output",
    "-o",
    "output_file",
    type=click.File("w", encoding="utf-8", lazy=True),
    default="-",
    help="Output file",
)
def gen(mode: str, input_file: IO[bytes], output_file: IO[str]) -> None:
    """Generate C code for MODE from a protocol XML document."""
    protocol = _load(input_file)
    table = plan_tables(protocol)
    MODES[mode](protocol, table, output_file)


@cli.command()
@click.option(
    "--input", "-i", "input_file", type=click.File("rb"), default="-", help="Protocol XML file"
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: IO[bytes], output_json: bool) -> None:
    """Display opcodes, signatures and type table offsets."""
    protocol = _load(input_file)
    table = plan_tables(protocol)

    if output_json:
        _output_json(protocol, table)
    else:
        _output_plain(protocol, table)


def _output_json(protocol: Protocol, table: TypeTable) -> None:
    """Output protocol info as JSON."""
    data: dict = {
        "protocol": {
            "name": protocol.name,
            "interfaces": len(protocol.interfaces),
        },
        "interfaces": {},
        "types": {
            "null_run_length": table.null_run_length,
            "type_index": table.type_index,
            "slots": list(table.slots),
        },
    }

    for interface, plan in zip(protocol.interfaces, table.interfaces, strict=True):
        data["interfaces"][interface.name] = {
            "version": interface.version,
            "requests": [m.to_dict() for m in plan.requests],
            "events": [m.to_dict() for m in plan.events],
            "properties": [p.name for p in interface.properties],
        }

    print(json.dumps(data, indent=2))


def _message_rows(table: Table, direction: str, messages: tuple) -> None:
    for message in messages:
        table.add_row(
            direction,
            str(message.opcode),
            message.name,
            message.signature or "-",
            str(message.type_index),
        )


def _interface_table(plan: InterfacePlan) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Dir", style="dim")
    table.add_column("Opcode", style="green", justify="right")
    table.add_column("Message", style="white")
    table.add_column("Signature", style="yellow")
    table.add_column("Types", style="dim", justify="right")

    _message_rows(table, "req", plan.requests)
    _message_rows(table, "evt", plan.events)
    return table


def _output_plain(protocol: Protocol, table: TypeTable) -> None:
    """Output protocol info using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]Protocol[/bold cyan] {protocol.name}")
    summary = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    summary.add_column("Label", style="dim")
    summary.add_column("Value", style="white")
    summary.add_row("Interfaces", str(len(protocol.interfaces)))
    summary.add_row("Null run", str(table.null_run_length))
    summary.add_row("Type slots", str(len(table.slots)))
    console.print(summary)
    console.print()

    for interface, plan in zip(protocol.interfaces, table.interfaces, strict=True):
        flags = [flag for flag in ("custom", "global") if getattr(interface, f"client_{flag}")]
        suffix = f" ({', '.join(flags)})" if flags else ""
        console.print(
            f"[bold cyan]{interface.name}[/bold cyan] v{interface.version}{suffix}",
            highlight=False,
        )
        if plan.requests or plan.events:
            console.print(_interface_table(plan))
        console.print()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
