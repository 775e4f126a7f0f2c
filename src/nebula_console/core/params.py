"""Query parameters defined with `:param`.

A definition looks like `:param p1 => {"a": [1, 2.5, 'x']}`. The value is
JSON with single quotes allowed for strings. Each parameter is kept both as
the decoded Python value (for `:params`) and as a driver Value (for
execute_parameter).
"""

from __future__ import annotations

import json
import re
from typing import Any

from nebula3.common.ttypes import NList, NMap, NullType, Value

from nebula_console.core.errors import ParamError

_DEFINITION = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=>(.*)$", re.DOTALL)


def parse_param_definition(text: str) -> tuple[str, str]:
    """Split `name => value` into its name and raw (stripped) value text.

    Raises:
        ParamError: If the text is not a definition.
    """
    match = _DEFINITION.match(text)
    if match is None:
        raise ParamError(f"invalid parameter definition: {text.strip()!r}, expected `name => value`")
    return match.group(1), match.group(2).strip()


def parse_param_value(raw: str) -> Any:
    """Decode a parameter value written as JSON (single quotes allowed)."""
    try:
        return json.loads(raw.replace("'", '"'))
    except json.JSONDecodeError as e:
        raise ParamError(f"invalid parameter value {raw!r}: {e.msg}") from e


def to_value(obj: Any) -> Value:
    """Convert a decoded JSON value to the driver's Value union."""
    value = Value()
    if obj is None:
        value.set_nVal(NullType.__NULL__)
    elif isinstance(obj, bool):
        # bool first: bool is a subclass of int
        value.set_bVal(obj)
    elif isinstance(obj, int):
        value.set_iVal(obj)
    elif isinstance(obj, float):
        value.set_fVal(obj)
    elif isinstance(obj, str):
        value.set_sVal(obj.encode("utf-8"))
    elif isinstance(obj, list):
        value.set_lVal(NList(values=[to_value(item) for item in obj]))
    elif isinstance(obj, dict):
        kvs = {str(k).encode("utf-8"): to_value(v) for k, v in obj.items()}
        value.set_mVal(NMap(kvs=kvs))
    else:
        raise ParamError(f"unsupported parameter type: {type(obj).__name__}")
    return value


class ParameterMap:
    """Parameters bound to every statement sent to the server."""

    def __init__(self) -> None:
        self._raw: dict[str, Any] = {}
        self._values: dict[str, Value] = {}

    def __len__(self) -> int:
        return len(self._raw)

    def __contains__(self, name: object) -> bool:
        return name in self._raw

    def define(self, definition: str) -> str:
        """Apply a `name => value` definition and return the parameter name.

        An empty value removes the parameter.
        """
        name, raw = parse_param_definition(definition)
        if not raw:
            self.remove(name)
            return name

        obj = parse_param_value(raw)
        # Convert before storing so a bad value leaves the map untouched
        self._values[name] = to_value(obj)
        self._raw[name] = obj
        return name

    def remove(self, name: str) -> None:
        self._raw.pop(name, None)
        self._values.pop(name, None)

    def get(self, name: str) -> Any:
        """Decoded value of a parameter.

        Raises:
            KeyError: If the parameter is not defined.
        """
        return self._raw[name]

    def driver_values(self) -> dict[str, Value]:
        """Parameters in the form execute_parameter expects."""
        return dict(self._values)

    def format(self, name: str | None = None) -> str:
        """Render one parameter or all of them as `name => json` lines."""
        if name is not None:
            if name not in self._raw:
                raise ParamError(f"parameter {name} not defined")
            names = [name]
        else:
            names = sorted(self._raw)
        return "\n".join(
            f"{n} => {json.dumps(self._raw[n], ensure_ascii=False)}" for n in names
        )
