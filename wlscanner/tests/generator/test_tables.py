"""Tests for signature and type table planning."""

import pytest

from wlscanner.generator import plan_tables, signature
from wlscanner.generator.tables import TablePlanner, TypeTable
from wlscanner.generator.types import Arg, ArgKind, Interface, Message, Protocol, make_type


def _arg(kind: ArgKind, interface: str | None = None) -> Arg:
    return Arg(name="a", type=make_type(kind, interface))


def describe_signature():
    def maps_each_kind_to_one_character(expect):
        message = Message(
            name="all",
            args=[
                _arg(ArgKind.INT),
                _arg(ArgKind.UINT),
                _arg(ArgKind.STRING),
                _arg(ArgKind.OBJECT, "b"),
                _arg(ArgKind.ARRAY),
                _arg(ArgKind.FD),
                _arg(ArgKind.DOUBLE),
                _arg(ArgKind.NEW_ID, "c"),
            ],
        )
        expect(signature(message)) == "iusoahdn"

    def is_empty_without_arguments(expect):
        expect(signature(Message(name="destroy"))) == ""

    def matches_argument_count(expect, protocol):
        for interface in protocol.interfaces:
            for message in (*interface.requests, *interface.events):
                expect(len(signature(message))) == message.arg_count

    def covers_synthesized_messages(expect, protocol):
        table = plan_tables(protocol)
        surface = table.interface("wl_surface")
        expect([m.signature for m in surface.requests]) == ["", "oii", "iiii", "s", "uu"]
        expect([m.signature for m in surface.events]) == ["o", "s", "uu"]


def describe_plan_tables():
    def computes_null_run_length(expect, protocol):
        table = plan_tables(protocol)
        expect(table.null_run_length) == 4

    def lays_out_slots_after_null_run(expect, protocol):
        table = plan_tables(protocol)
        expect(table.slots) == (
            None,
            None,
            None,
            None,
            None,
            "wl_surface",
            "wl_buffer",
            None,
            None,
            "wl_output",
        )
        expect(table.type_index) == 6

    def points_all_null_messages_at_zero(expect, protocol):
        table = plan_tables(protocol)
        display = table.interface("wl_display")
        expect([m.type_index for m in display.requests]) == [0, 0]
        expect([m.type_index for m in display.events]) == [4, 0]

        surface = table.interface("wl_surface")
        expect([m.type_index for m in surface.requests]) == [0, 6, 0, 0, 0]
        expect([m.type_index for m in surface.events]) == [9, 0, 0]

    def gives_each_referencing_message_its_own_slice(expect, protocol):
        table = plan_tables(protocol)
        create_surface = table.interface("wl_compositor").requests[0]
        expect(create_surface.type_index) == 5
        expect(table.slots[5]) == "wl_surface"

        attach = table.interface("wl_surface").requests[1]
        expect(table.slots[attach.type_index : attach.type_index + 3]) == (
            "wl_buffer",
            None,
            None,
        )

    def maps_untyped_objects_to_null(expect, protocol):
        table = plan_tables(protocol)
        invalid_object = table.interface("wl_display").events[0]
        expect(invalid_object.type_index) == 4
        expect(table.slots[4]) == None

    def collects_externs_in_first_seen_order(expect, protocol):
        table = plan_tables(protocol)
        expect(table.externs) == ("wl_surface", "wl_buffer", "wl_output")

    def numbers_opcodes_per_direction(expect, protocol):
        table = plan_tables(protocol)
        surface = table.interface("wl_surface")
        expect([(m.name, m.opcode) for m in surface.requests]) == [
            ("destroy", 0),
            ("attach", 1),
            ("damage", 2),
            ("set_title", 3),
            ("set_state", 4),
        ]
        expect([(m.name, m.opcode) for m in surface.events]) == [
            ("enter", 0),
            ("title_notify", 1),
            ("state_notify", 2),
        ]

    def plans_interfaces_without_messages(expect, protocol):
        table = plan_tables(protocol)
        buffer = table.interface("wl_buffer")
        expect(buffer.requests) == ()
        expect(buffer.events) == ()

    def is_idempotent(expect, protocol):
        expect(plan_tables(protocol)) == plan_tables(protocol)

    def leaves_the_model_untouched(expect, protocol):
        before = protocol.to_dict()
        plan_tables(protocol)
        expect(protocol.to_dict()) == before

    def raises_for_unknown_interface(expect, protocol):
        table = plan_tables(protocol)
        with pytest.raises(KeyError):
            table.interface("wl_seat")

    def serializes_to_json(expect, protocol):
        table = plan_tables(protocol)
        data = table.to_dict()
        expect(data["null_run_length"]) == 4
        expect(data["interfaces"][2]["requests"][1]["signature"]) == "oii"


def describe_table_planner():
    def handles_protocol_without_messages(expect):
        table = plan_tables(Protocol(name="empty", interfaces=[Interface(name="a", version=1)]))
        expect(table) == TypeTable(
            null_run_length=0,
            slots=(),
            externs=(),
            interfaces=(table.interfaces[0],),
        )
        expect(table.type_index) == 0

    def uses_zero_null_run_for_argumentless_messages(expect):
        proto = Protocol(
            name="p",
            interfaces=[
                Interface(name="a", version=1, requests=[Message(name="destroy", destructor=True)])
            ],
        )
        planner = TablePlanner(proto)
        expect(planner.calc_null_run_length()) == 0
        expect(planner.plan().interface("a").requests[0].type_index) == 0

    def reserves_slots_only_after_null_run(expect):
        proto = Protocol(
            name="p",
            interfaces=[
                Interface(
                    name="a",
                    version=1,
                    requests=[
                        Message(name="get", args=[_arg(ArgKind.NEW_ID, "b"), _arg(ArgKind.INT)]),
                        Message(name="ping", args=[_arg(ArgKind.UINT)]),
                    ],
                )
            ],
        )
        table = plan_tables(proto)
        expect(table.null_run_length) == 1
        expect(table.slots) == (None, "b", None)
        expect(table.interface("a").requests[0].type_index) == 1

    def does_not_extern_untyped_objects(expect):
        proto = Protocol(
            name="p",
            interfaces=[
                Interface(
                    name="a",
                    version=1,
                    events=[Message(name="error", args=[_arg(ArgKind.OBJECT, "wl_object")])],
                )
            ],
        )
        expect(TablePlanner(proto).calc_externs()) == ()
