"""Render driver values as console text.

The driver already decodes every cell into the tagged `ttypes.Value` union;
this module only turns each variant into its display form.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from nebula3.common.ttypes import NullType, Value

MAX_DEPTH = 256

_NULL_NAMES = {
    NullType.__NULL__: "NULL",
    NullType.NaN: "NaN",
    NullType.BAD_DATA: "BAD_DATA",
    NullType.BAD_TYPE: "BAD_TYPE",
    NullType.ERR_OVERFLOW: "ERR_OVERFLOW",
    NullType.UNKNOWN_PROP: "UNKNOWN_PROP",
    NullType.DIV_BY_ZERO: "DIV_BY_ZERO",
    NullType.OUT_OF_RANGE: "OUT_OF_RANGE",
}


def to_text(raw: bytes | str | None) -> str:
    """Decode a thrift binary field; the driver leaves names and strings as bytes."""
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)


def float_to_string(number: float) -> str:
    """Shortest round-trip form, always carrying a decimal point."""
    text = repr(number)
    if "." in text or "inf" in text or "nan" in text:
        return text
    if "e" in text:
        mantissa, exponent = text.split("e", 1)
        return f"{mantissa}.0e{exponent}"
    return f"{text}.0"


def _props_to_string(props: dict[Any, Value] | None, depth: int, sep: str = ": ") -> str:
    if not props:
        return ""
    items = sorted(((to_text(k), v) for k, v in props.items()), key=lambda kv: kv[0])
    return ", ".join(f"{k}{sep}{value_to_string(v, depth - 1)}" for k, v in items)


def _vid_to_string(vid: Any, depth: int) -> str:
    # nebula3 carries vids as Values; older servers sent raw bytes
    if isinstance(vid, Value):
        return value_to_string(vid, depth - 1)
    return f'"{to_text(vid)}"'


def _vertex_to_string(vertex: Any, depth: int) -> str:
    parts = [_vid_to_string(vertex.vid, depth)]
    for tag in vertex.tags or []:
        parts.append(f":{to_text(tag.name)}{{{_props_to_string(tag.props, depth)}}}")
    return f"({' '.join(parts)})"


def _edge_to_string(edge: Any, depth: int) -> str:
    src = _vid_to_string(edge.src, depth)
    dst = _vid_to_string(edge.dst, depth)
    if edge.type is not None and edge.type < 0:
        src, dst = dst, src
    props = _props_to_string(edge.props, depth)
    return f"({src})-[:{to_text(edge.name)}@{edge.ranking}{{{props}}}]->({dst})"


def _path_to_string(path: Any, depth: int) -> str:
    text = _vertex_to_string(path.src, depth)
    for step in path.steps or []:
        rel = f"[:{to_text(step.name)}@{step.ranking}{{{_props_to_string(step.props, depth)}}}]"
        if step.type is not None and step.type < 0:
            text += f"<-{rel}-"
        else:
            text += f"-{rel}->"
        text += _vertex_to_string(step.dst, depth)
    return f"<{text}>"


def _join(values: Iterable[Value], depth: int) -> str:
    return ", ".join(value_to_string(v, depth - 1) for v in values)


def _map_to_string(nmap: Any, depth: int) -> str:
    items = sorted(((to_text(k), v) for k, v in (nmap.kvs or {}).items()), key=lambda kv: kv[0])
    return "{" + ", ".join(f"{k}: {value_to_string(v, depth - 1)}" for k, v in items) + "}"


def _date_to_string(d: Any) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def _time_to_string(t: Any) -> str:
    return f"{t.hour:02d}:{t.minute:02d}:{t.sec:02d}.{t.microsec:06d}"


def _datetime_to_string(dt: Any) -> str:
    return f"{_date_to_string(dt)}T{_time_to_string(dt)}"


def _duration_to_string(du: Any) -> str:
    return f"P{du.months}MT{du.seconds}.{du.microseconds:06d}S"


_RENDERERS: dict[int, Callable[[Value, int], str]] = {
    Value.NVAL: lambda v, d: _NULL_NAMES.get(v.get_nVal(), "NULL"),
    Value.BVAL: lambda v, d: "true" if v.get_bVal() else "false",
    Value.IVAL: lambda v, d: str(v.get_iVal()),
    Value.FVAL: lambda v, d: float_to_string(v.get_fVal()),
    Value.SVAL: lambda v, d: f'"{to_text(v.get_sVal())}"',
    Value.DVAL: lambda v, d: _date_to_string(v.get_dVal()),
    Value.TVAL: lambda v, d: _time_to_string(v.get_tVal()),
    Value.DTVAL: lambda v, d: _datetime_to_string(v.get_dtVal()),
    Value.VVAL: lambda v, d: _vertex_to_string(v.get_vVal(), d),
    Value.EVAL: lambda v, d: _edge_to_string(v.get_eVal(), d),
    Value.PVAL: lambda v, d: _path_to_string(v.get_pVal(), d),
    Value.LVAL: lambda v, d: f"[{_join(v.get_lVal().values or [], d)}]",
    Value.MVAL: lambda v, d: _map_to_string(v.get_mVal(), d),
    Value.UVAL: lambda v, d: f"{{{_join(v.get_uVal().values or [], d)}}}",
    Value.DUVAL: lambda v, d: _duration_to_string(v.get_duVal()),
}


def value_to_string(value: Value | None, depth: int = MAX_DEPTH) -> str:
    """Render one cell.

    Args:
        value: Driver value (any variant of the union).
        depth: Remaining nesting budget; containers spend one level per child.

    Returns:
        Display text; "..." once the budget is spent, "" for unset values.
    """
    if depth <= 0:
        return "..."
    if value is None:
        return ""
    renderer = _RENDERERS.get(value.getType())
    if renderer is None:
        return ""
    return renderer(value, depth)
