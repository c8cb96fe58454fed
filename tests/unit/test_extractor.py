# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Tests for module, port and instance extraction."""

import pytest
import yaml

from svreport.errors import WidthFormatError
from svreport.parser.syntax import NodeKind
from svreport.report.extractor import (
    Direction,
    InstRecord,
    ModuleRecord,
    PortRecord,
    parse_range_bound,
    write_module,
)
from svreport.report.walker import ReportMode, extract_definitions, report_tree
from svreport.report.writer import ReportWriter
from tests.fixtures.syntax_builder import (
    TreeBuilder,
    add_instance,
    add_module_header,
    add_port_declaration,
    ansi_module,
    nonansi_module,
)


def _ports(module):
    return [(p.name, p.direction, p.width) for p in module.ports]


def _report(tree) -> str:
    writer = ReportWriter()
    writer.emit(0, "files:")
    writer.emit(1, '- file_name: "test.sv"')
    report_tree(tree, writer, ReportMode.DEFINITIONS)
    return writer.getvalue()


class TestPortCarryOver:
    def test_port_without_direction_inherits_previous(self, builder):
        with ansi_module(builder, "m", [("a", "input", None), ("b", None, None)]):
            pass

        [module] = extract_definitions(builder.tree())
        assert _ports(module) == [("a", Direction.INPUT, 1), ("b", Direction.INPUT, 1)]

    def test_width_carries_until_direction_is_redeclared(self, builder):
        ports = [("a", "output", "7"), ("b", None, None), ("c", "input", None)]
        with ansi_module(builder, "m", ports):
            pass

        [module] = extract_definitions(builder.tree())
        assert _ports(module) == [
            ("a", Direction.OUTPUT, 8),
            ("b", Direction.OUTPUT, 8),
            ("c", Direction.INPUT, 1),
        ]

    def test_range_alone_keeps_direction(self, builder):
        with ansi_module(builder, "m", [("a", "output", None), ("b", None, "3")]):
            pass

        [module] = extract_definitions(builder.tree())
        assert _ports(module) == [("a", Direction.OUTPUT, 1), ("b", Direction.OUTPUT, 4)]

    def test_first_port_defaults_to_single_bit_input(self, builder):
        with ansi_module(builder, "m", [("a", None, None)]):
            pass

        [module] = extract_definitions(builder.tree())
        assert _ports(module) == [("a", Direction.INPUT, 1)]

    def test_state_carries_into_the_next_module_of_the_file(self, builder):
        with ansi_module(builder, "first", [("a", "output", "3")]):
            pass
        with ansi_module(builder, "second", [("b", None, None)]):
            pass

        first, second = extract_definitions(builder.tree())
        assert _ports(second) == [("b", Direction.OUTPUT, 4)]


class TestNonAnsiDeclarations:
    def test_identifier_list_shares_direction_and_width(self, builder):
        with nonansi_module(builder, "m", ["q", "r", "clk"]):
            add_port_declaration(builder, "output", ["q", "r"], msb="3")
            add_port_declaration(builder, "input", ["clk"])

        [module] = extract_definitions(builder.tree())
        assert _ports(module) == [
            ("q", Direction.OUTPUT, 4),
            ("r", Direction.OUTPUT, 4),
            ("clk", Direction.INPUT, 1),
        ]

    def test_header_port_list_alone_reports_no_ports(self, builder):
        with nonansi_module(builder, "m", ["a", "b"]):
            pass

        [module] = extract_definitions(builder.tree())
        assert module.ports == []

    def test_ports_declared_after_instances_render_first(self, builder):
        with nonansi_module(builder, "m", ["clk"]):
            add_instance(builder, "sub", "u0")
            add_port_declaration(builder, "input", ["clk"])

        report = yaml.safe_load(_report(builder.tree()))
        [module] = report["files"][0]["defs"]
        assert list(module) == ["mod_name", "ports", "insts"]
        assert module["ports"] == [{"port_name": "clk", "port_dir": "input", "port_width": 1}]
        assert module["insts"] == [{"mod_name": "sub", "inst_name": "u0"}]


class TestInstances:
    def test_instances_in_source_order(self, builder):
        with ansi_module(builder, "top"):
            add_instance(builder, "sub", "u0")
            add_instance(builder, "sub", "u1")
            add_instance(builder, "fifo", "u_fifo")

        [module] = extract_definitions(builder.tree())
        assert module.insts == [
            InstRecord("sub", "u0"),
            InstRecord("sub", "u1"),
            InstRecord("fifo", "u_fifo"),
        ]

    def test_instance_outside_any_module_is_skipped(self, builder):
        add_instance(builder, "sub", "u0")
        with ansi_module(builder, "top"):
            pass

        [module] = extract_definitions(builder.tree())
        assert module.insts == []

    def test_instance_without_name_is_skipped(self, builder):
        with ansi_module(builder, "top"):
            with builder.node(NodeKind.MODULE_INSTANTIATION):
                builder.ident("sub")
                builder.tok(";")

        [module] = extract_definitions(builder.tree())
        assert module.insts == []


class TestModuleDeclarations:
    def test_modules_in_declaration_order(self, builder):
        for name in ("a", "b", "c"):
            with ansi_module(builder, name):
                pass

        assert [m.name for m in extract_definitions(builder.tree())] == ["a", "b", "c"]

    def test_escaped_identifier_keeps_its_spelling(self, builder):
        with builder.node(NodeKind.MODULE_DECLARATION_ANSI, "module_declaration"):
            add_module_header(builder, "\\bus+idx", NodeKind.ESCAPED_IDENTIFIER)
            builder.tok(";", sep="\n")
            builder.tok("endmodule")

        [module] = extract_definitions(builder.tree())
        assert module.name == "\\bus+idx"

    def test_name_without_port_header(self, builder):
        with nonansi_module(builder, "m"):
            pass

        [module] = extract_definitions(builder.tree())
        assert module.name == "m"
        assert module.ports == []

    def test_name_is_not_taken_from_ports(self, builder):
        with ansi_module(builder, "top", [("a", "input", None)]):
            pass

        [module] = extract_definitions(builder.tree())
        assert module.name == "top"
        assert _ports(module) == [("a", Direction.INPUT, 1)]

    def test_module_identifier_inside_port_header(self, builder):
        with builder.node(NodeKind.MODULE_DECLARATION_ANSI, "module_declaration"):
            with builder.node(NodeKind.MODULE_ANSI_HEADER):
                builder.tok("module")
                with builder.node(NodeKind.MODULE_IDENTIFIER):
                    builder.ident("legacy", sep="")
                builder.tok(";", sep="\n")
            builder.tok("endmodule")

        [module] = extract_definitions(builder.tree())
        assert module.name == "legacy"

    def test_declaration_without_identifier_is_ignored(self, builder):
        with builder.node(NodeKind.MODULE_DECLARATION_ANSI, "module_declaration"):
            builder.tok("module")
            builder.tok(";")
            builder.tok("endmodule")

        assert extract_definitions(builder.tree()) == []

    def test_ports_before_any_module_are_skipped(self, builder):
        add_port_declaration(builder, "input", ["stray"])
        with ansi_module(builder, "m"):
            pass

        [module] = extract_definitions(builder.tree())
        assert module.ports == []


class TestWidths:
    def test_non_numeric_bound_raises(self, builder):
        with ansi_module(builder, "m", [("a", "input", "WIDTH-1")]):
            pass

        with pytest.raises(WidthFormatError) as exc_info:
            extract_definitions(builder.tree())
        assert exc_info.value.text == "WIDTH-1"

    def test_parse_range_bound(self):
        assert parse_range_bound("15") == 15
        assert parse_range_bound(" 0 ") == 0

    @pytest.mark.parametrize("text", ["-1", "3'd4", "", "٣"])
    def test_parse_range_bound_rejects(self, text):
        with pytest.raises(ValueError):
            parse_range_bound(text)


class TestWriteModule:
    def test_empty_lists_use_flow_markers(self):
        writer = ReportWriter()
        write_module(writer, ModuleRecord("leaf"))

        assert writer.lines == [
            '      - mod_name: "leaf"',
            "        ports: []",
            "        insts: []",
        ]

    def test_ports_and_instances(self):
        record = ModuleRecord(
            "top",
            ports=[PortRecord("q", Direction.OUTPUT, 4)],
            insts=[InstRecord("sub", "u0")],
        )
        writer = ReportWriter()
        write_module(writer, record)

        assert writer.lines == [
            '      - mod_name: "top"',
            "        ports:",
            '          - port_name: "q"',
            '            port_dir: "output"',
            "            port_width: 4",
            "        insts:",
            '          - mod_name: "sub"',
            '            inst_name: "u0"',
        ]


class TestDefinitionsReport:
    def test_report_is_valid_yaml(self, builder):
        with ansi_module(builder, "top", [("clk", "input", None), ("q", "output", "3")]):
            add_instance(builder, "counter", "u_counter")
        with ansi_module(builder, "counter"):
            pass

        report = yaml.safe_load(_report(builder.tree()))

        assert report == {
            "files": [{
                "file_name": "test.sv",
                "defs": [
                    {
                        "mod_name": "top",
                        "ports": [
                            {"port_name": "clk", "port_dir": "input", "port_width": 1},
                            {"port_name": "q", "port_dir": "output", "port_width": 4},
                        ],
                        "insts": [{"mod_name": "counter", "inst_name": "u_counter"}],
                    },
                    {"mod_name": "counter", "ports": [], "insts": []},
                ],
            }]
        }

    def test_file_without_modules_has_null_defs(self):
        tree = TreeBuilder().tree()

        report = yaml.safe_load(_report(tree))
        assert report["files"][0]["defs"] is None
