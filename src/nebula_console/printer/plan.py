"""Execution plan rendering for EXPLAIN / PROFILE results.

Three formats come back from the server:
- "row":        one table row per plan node
- "dot":        Graphviz digraph that follows select/loop branches
- "dot:struct": Graphviz digraph of the raw dependency structure

DOT formats are shown inside a one-column "plan" table and can be mirrored
to a file with `:set dot`.
"""

from __future__ import annotations

import logging
from typing import IO, Any

from rich.console import Console
from rich.table import Table

from nebula_console.core.errors import ExportError
from nebula_console.printer.dataset import build_table, print_table
from nebula_console.printer.values import to_text

logger = logging.getLogger(__name__)


def graphviz_string(text: str) -> str:
    """Escape record-label metacharacters."""
    for ch in ("{", "}", '"', "[", "]"):
        text = text.replace(ch, "\\" + ch)
    return text


def node_name(node: Any) -> str:
    return f"{to_text(node.name)}_{node.id}"


def _description(node: Any) -> list[tuple[str, str]]:
    return [(to_text(pair.key), to_text(pair.value)) for pair in node.description or []]


def _cond_edge_label(cond_node: Any, do_branch: bool) -> str:
    name = to_text(cond_node.name).lower()
    if name.startswith("select"):
        return "Y" if do_branch else "N"
    if name.startswith("loop") and do_branch:
        return "Do"
    return ""


def _node_string(node: Any, name: str) -> str:
    output_var = graphviz_string(to_text(node.output_var))
    input_var = ""
    for key, value in _description(node):
        if key == "inputVar":
            input_var = graphviz_string(value)
    return (
        f'\t"{name}"[label="{{{name}|outputVar: {output_var}|inputVar: {input_var}}}", '
        f"shape=Mrecord];\n"
    )


def _edge_string(start: str, end: str) -> str:
    return f'\t"{start}"->"{end}";\n'


def _conditional_edge_string(start: str, end: str, label: str) -> str:
    return f'\t"{start}"->"{end}"[label="{label}", style=dashed];\n'


def _conditional_node_string(name: str) -> str:
    return f'\t"{name}"[shape=diamond];\n'


class PlanDescPrinter:
    """Prints plan descriptions and writes DOT text to a file when one is set."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self._plan: Any = None
        self._dot_file: IO[str] | None = None
        self._dot_path: str | None = None

    @property
    def dot_path(self) -> str | None:
        return self._dot_path

    def set_out_dot(self, path: str) -> None:
        """Write the DOT text of every following non-row plan to `path`.

        Raises:
            ExportError: If the file cannot be opened.
        """
        self.unset_out_dot()
        try:
            self._dot_file = open(path, "w", encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Open or Create file {path} failed, {e}") from e
        self._dot_path = path
        logger.info("dot export enabled: %s", path)

    def unset_out_dot(self) -> None:
        if self._dot_file is None:
            return
        try:
            self._dot_file.close()
        except OSError as e:
            logger.warning("Close file %s failed, %s", self._dot_path, e)
        self._dot_file = None
        self._dot_path = None

    # -------------------------------------------------------------------------
    # Plan navigation
    # -------------------------------------------------------------------------

    def _node_by_id(self, node_id: int) -> Any:
        index = self._plan.node_index_map[node_id]
        return self._plan.plan_node_descs[index]

    def _find_branch_end_node(self, cond_node_id: int, is_do_branch: bool) -> int:
        for node in self._plan.plan_node_descs:
            info = node.branch_info
            if (
                info is not None
                and info.condition_node_id == cond_node_id
                and info.is_do_branch == is_do_branch
            ):
                return node.id
        return -1

    def _find_first_start_node_from(self, node_id: int) -> int:
        node = self._node_by_id(node_id)
        while node.dependencies:
            node = self._node_by_id(node.dependencies[0])
        if to_text(node.name).lower() != "start":
            return -1
        return node.id

    def _branch_start_edge(self, cond_name: str, end_id: int, label: str) -> list[str]:
        # dashed edge from the condition node to the Start node of its branch
        start_id = self._find_first_start_node_from(end_id)
        if start_id < 0:
            return []
        return [_conditional_edge_string(cond_name, node_name(self._node_by_id(start_id)), label)]

    # -------------------------------------------------------------------------
    # DOT builders
    # -------------------------------------------------------------------------

    def make_dot_graph_by_struct(self) -> str:
        parts = ["digraph exec_plan {\n", "\trankdir=BT;\n"]
        for node in self._plan.plan_node_descs:
            name = node_name(node)
            if to_text(node.name).lower() in ("select", "loop"):
                parts.append(_conditional_node_string(name))
            else:
                parts.append(_node_string(node, name))

            for dep_id in node.dependencies or []:
                parts.append(_edge_string(node_name(self._node_by_id(dep_id)), name))

            info = node.branch_info
            if info is not None:
                cond_node = self._node_by_id(info.condition_node_id)
                label = _cond_edge_label(cond_node, info.is_do_branch)
                parts.append(_conditional_edge_string(name, node_name(cond_node), label))
        parts.append("}")
        return "".join(parts)

    def make_dot_graph(self) -> str:
        parts = ["digraph exec_plan {\n", "\trankdir=BT;\n"]
        for node in self._plan.plan_node_descs:
            name = node_name(node)
            kind = to_text(node.name).lower()
            if kind == "select":
                parts.append(_conditional_node_string(name))
                dep = self._node_by_id(node.dependencies[0])
                for do_branch, label in ((True, "Y"), (False, "N")):
                    end_id = self._find_branch_end_node(node.id, do_branch)
                    if end_id < 0:
                        continue
                    parts.append(_edge_string(node_name(self._node_by_id(end_id)), node_name(dep)))
                    parts.extend(self._branch_start_edge(name, end_id, label))
            elif kind == "loop":
                parts.append(_conditional_node_string(name))
                dep = self._node_by_id(node.dependencies[0])
                do_id = self._find_branch_end_node(node.id, True)
                if do_id >= 0:
                    parts.append(_edge_string(node_name(self._node_by_id(do_id)), name))
                    parts.extend(self._branch_start_edge(name, do_id, "Do"))
                parts.append(_edge_string(node_name(dep), name))
            else:
                parts.append(_node_string(node, name))
                for dep_id in node.dependencies or []:
                    parts.append(_edge_string(node_name(self._node_by_id(dep_id)), name))
        parts.append("}")
        return "".join(parts)

    # -------------------------------------------------------------------------
    # Row format
    # -------------------------------------------------------------------------

    @staticmethod
    def _profiling_cell(node: Any) -> str:
        lines: list[str] = []
        for i, profile in enumerate(node.profiles or []):
            other_stats = profile.other_stats
            if other_stats:
                lines.append("{")
            lines.append(
                f"ver: {i}, rows: {profile.rows}, execTime: {profile.exec_duration_in_us}us, "
                f"totalTime: {profile.total_duration_in_us}us"
            )
            for key, value in sorted((other_stats or {}).items()):
                lines.append(f"{to_text(key)}: {to_text(value)}")
            if other_stats:
                lines.append("}")
        return "\n".join(lines)

    @staticmethod
    def _operator_info_cell(node: Any) -> str:
        lines: list[str] = []
        info = node.branch_info
        if info is not None:
            branch = "true" if info.is_do_branch else "false"
            lines.append(f"branch: {branch}, nodeId: {info.condition_node_id}")
        lines.append(f"outputVar: {to_text(node.output_var)}")
        lines.extend(f"{key}: {value}" for key, value in _description(node))
        return "\n".join(lines)

    def render_by_row(self) -> Table:
        header = ["id", "name", "dependencies", "profiling data", "operator info"]
        rows = []
        for node in self._plan.plan_node_descs:
            rows.append(
                [
                    str(node.id),
                    to_text(node.name),
                    ",".join(str(dep) for dep in node.dependencies or []),
                    self._profiling_cell(node),
                    self._operator_info_cell(node),
                ]
            )
        return build_table(header, rows, show_lines=True)

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def print_plan_desc(self, plan: Any) -> None:
        """Print a plan in the format the server chose."""
        self._plan = plan
        fmt = to_text(plan.format).lower()
        if fmt == "row":
            print_table(self.console, self.render_by_row())
            return

        if fmt == "dot":
            dot = self.make_dot_graph()
        elif fmt == "dot:struct":
            dot = self.make_dot_graph_by_struct()
        else:
            logger.warning("unknown plan format: %s", fmt)
            return

        print_table(self.console, build_table(["plan"], [[dot]]))
        if self._dot_file is not None:
            self._write_dot(dot)

    def _write_dot(self, dot: str) -> None:
        assert self._dot_file is not None
        try:
            self._dot_file.seek(0)
            self._dot_file.truncate()
            self._dot_file.write(dot + "\n")
            self._dot_file.flush()
        except OSError as e:
            raise ExportError(f"Write file {self._dot_path} failed, {e}") from e
