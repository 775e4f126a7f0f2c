"""Tests for execution plan rendering."""

from __future__ import annotations

import logging
from io import StringIO

import pytest
from nebula3.graph.ttypes import (
    Pair,
    PlanDescription,
    PlanNodeBranchInfo,
    PlanNodeDescription,
    ProfilingStats,
)
from rich.console import Console

from nebula_console.core.errors import ExportError
from nebula_console.printer.plan import PlanDescPrinter, graphviz_string, node_name


def make_node(node_id, name, deps=(), branch=None, profiles=None, input_var=None):
    description = [Pair(key=b"inputVar", value=input_var.encode())] if input_var else []
    return PlanNodeDescription(
        name=name.encode(),
        id=node_id,
        output_var=f"__{name}_{node_id}".encode(),
        description=description,
        profiles=profiles,
        branch_info=branch,
        dependencies=list(deps),
    )


def make_plan(nodes, fmt="row"):
    return PlanDescription(
        plan_node_descs=nodes,
        node_index_map={node.id: i for i, node in enumerate(nodes)},
        format=fmt.encode(),
        optimize_time_in_us=12,
    )


@pytest.fixture
def linear_plan():
    """Start <- GetNeighbors <- Project."""
    return [
        make_node(0, "Start"),
        make_node(1, "GetNeighbors", deps=[0], input_var="__Start_0"),
        make_node(2, "Project", deps=[1], input_var="__GetNeighbors_1"),
    ]


@pytest.fixture
def select_plan():
    """Select with a Y branch (2 <- 3) and an N branch (4 <- 5)."""
    return [
        make_node(0, "Start"),
        make_node(1, "Select", deps=[0]),
        make_node(2, "Project", deps=[3], branch=PlanNodeBranchInfo(is_do_branch=True, condition_node_id=1)),
        make_node(3, "Start"),
        make_node(4, "Project", deps=[5], branch=PlanNodeBranchInfo(is_do_branch=False, condition_node_id=1)),
        make_node(5, "Start"),
    ]


class TestHelpers:
    """Tests for DOT string helpers."""

    def test_graphviz_string_escapes_record_chars(self):
        """Braces, brackets and quotes are backslash-escaped."""
        assert graphviz_string('{a}"[b]') == '\\{a\\}\\"\\[b\\]'

    def test_node_name(self):
        """Node names combine the operator and id."""
        assert node_name(make_node(7, "Filter")) == "Filter_7"


class TestDotGraphs:
    """Tests for the DOT builders."""

    def test_struct_graph(self, console, linear_plan):
        """dot:struct emits every node and dependency edge."""
        printer = PlanDescPrinter(console)
        printer._plan = make_plan(linear_plan, "dot:struct")
        dot = printer.make_dot_graph_by_struct()

        assert dot.startswith("digraph exec_plan {\n\trankdir=BT;\n")
        assert dot.endswith("}")
        assert (
            '\t"GetNeighbors_1"[label="{GetNeighbors_1|outputVar: __GetNeighbors_1|'
            'inputVar: __Start_0}", shape=Mrecord];\n' in dot
        )
        assert '\t"Start_0"->"GetNeighbors_1";\n' in dot
        assert '\t"GetNeighbors_1"->"Project_2";\n' in dot

    def test_struct_graph_marks_branches(self, console, select_plan):
        """Branch nodes get a dashed edge to their condition node."""
        printer = PlanDescPrinter(console)
        printer._plan = make_plan(select_plan, "dot:struct")
        dot = printer.make_dot_graph_by_struct()

        assert '\t"Select_1"[shape=diamond];\n' in dot
        assert '\t"Project_2"->"Select_1"[label="Y", style=dashed];\n' in dot
        assert '\t"Project_4"->"Select_1"[label="N", style=dashed];\n' in dot

    def test_dot_graph_follows_select_branches(self, console, select_plan):
        """dot links each branch end to the select's input and its start to the select."""
        printer = PlanDescPrinter(console)
        printer._plan = make_plan(select_plan, "dot")
        dot = printer.make_dot_graph()

        assert '\t"Select_1"[shape=diamond];\n' in dot
        assert '\t"Project_2"->"Start_0";\n' in dot
        assert '\t"Select_1"->"Start_3"[label="Y", style=dashed];\n' in dot
        assert '\t"Project_4"->"Start_0";\n' in dot
        assert '\t"Select_1"->"Start_5"[label="N", style=dashed];\n' in dot

    def test_dot_graph_loop(self, console):
        """Loop nodes get a Do branch and an edge from their dependency."""
        nodes = [
            make_node(0, "Start"),
            make_node(1, "Loop", deps=[0]),
            make_node(2, "Project", deps=[3], branch=PlanNodeBranchInfo(is_do_branch=True, condition_node_id=1)),
            make_node(3, "Start"),
        ]
        printer = PlanDescPrinter(console)
        printer._plan = make_plan(nodes, "dot")
        dot = printer.make_dot_graph()

        assert '\t"Project_2"->"Loop_1";\n' in dot
        assert '\t"Loop_1"->"Start_3"[label="Do", style=dashed];\n' in dot
        assert '\t"Start_0"->"Loop_1";\n' in dot

    def test_dot_graph_missing_branch(self, console):
        """A select without branch nodes still renders."""
        nodes = [make_node(0, "Start"), make_node(1, "Select", deps=[0])]
        printer = PlanDescPrinter(console)
        printer._plan = make_plan(nodes, "dot")
        dot = printer.make_dot_graph()
        assert '\t"Select_1"[shape=diamond];\n' in dot
        assert "style=dashed" not in dot


class TestPrintPlanDesc:
    """Tests for print_plan_desc."""

    def test_row_format(self, console, capsys):
        """Row plans are a table with profiling and operator info."""
        profiles = [
            ProfilingStats(
                rows=1,
                exec_duration_in_us=2,
                total_duration_in_us=3,
                other_stats={b"total_rpc": b"4"},
            )
        ]
        nodes = [
            make_node(0, "Start"),
            make_node(1, "Project", deps=[0], profiles=profiles, input_var="__Start_0"),
        ]
        PlanDescPrinter(console).print_plan_desc(make_plan(nodes, "row"))
        out = capsys.readouterr().out

        for header in ("id", "name", "dependencies", "profiling data", "operator info"):
            assert header in out
        assert "ver: 0, rows: 1, execTime: 2us, totalTime: 3us" in out
        assert "total_rpc: 4" in out
        assert "outputVar: __Project_1" in out
        assert "inputVar: __Start_0" in out

    def test_row_format_branch_info(self, console, select_plan, capsys):
        """Branch nodes list their branch and condition node."""
        PlanDescPrinter(console).print_plan_desc(make_plan(select_plan, "row"))
        out = capsys.readouterr().out
        assert "branch: true, nodeId: 1" in out
        assert "branch: false, nodeId: 1" in out

    def test_dot_format_prints_plan_table(self, console, linear_plan, capsys):
        """DOT plans are shown in a one-column plan table."""
        PlanDescPrinter(console).print_plan_desc(make_plan(linear_plan, "dot"))
        out = capsys.readouterr().out
        assert "plan" in out
        assert "digraph exec_plan {" in out

    def test_dot_lines_intact_on_narrow_console(self, linear_plan):
        """Long DOT lines are not folded when the console is 80 columns wide."""
        buf = StringIO()
        printer = PlanDescPrinter(Console(file=buf))
        printer.print_plan_desc(make_plan(linear_plan, "dot:struct"))
        label = (
            '"GetNeighbors_1"[label="{GetNeighbors_1|outputVar: __GetNeighbors_1|'
            'inputVar: __Start_0}", shape=Mrecord];'
        )
        assert label in buf.getvalue()

    def test_unknown_format_logs_warning(self, console, linear_plan, capsys, caplog):
        """Unknown formats print nothing and log a warning."""
        with caplog.at_level(logging.WARNING):
            PlanDescPrinter(console).print_plan_desc(make_plan(linear_plan, "json"))
        assert capsys.readouterr().out == ""
        assert "unknown plan format: json" in caplog.text


class TestDotExport:
    """Tests for DOT file export."""

    def test_dot_file_overwritten(self, console, linear_plan, select_plan, tmp_path):
        """Each DOT plan replaces the file contents."""
        target = tmp_path / "plan.dot"
        printer = PlanDescPrinter(console)
        printer.set_out_dot(str(target))
        assert printer.dot_path == str(target)

        printer.print_plan_desc(make_plan(select_plan, "dot"))
        printer.print_plan_desc(make_plan(linear_plan, "dot:struct"))
        printer.unset_out_dot()

        text = target.read_text()
        assert text.count("digraph exec_plan") == 1
        assert "Select_1" not in text
        assert '"Start_0"->"GetNeighbors_1"' in text

    def test_row_format_not_exported(self, console, linear_plan, tmp_path):
        """Row plans leave the DOT file untouched."""
        target = tmp_path / "plan.dot"
        printer = PlanDescPrinter(console)
        printer.set_out_dot(str(target))
        printer.print_plan_desc(make_plan(linear_plan, "row"))
        printer.unset_out_dot()
        assert target.read_text() == ""

    def test_open_failure(self, console, tmp_path):
        """An unopenable target raises ExportError."""
        with pytest.raises(ExportError, match="Open or Create file"):
            PlanDescPrinter(console).set_out_dot(str(tmp_path / "missing" / "plan.dot"))
