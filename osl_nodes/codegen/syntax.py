# OSL network syntax: type names, literal values and identifiers

import re
from typing import Any, Dict, Iterable, Optional

from ..ir.types import DataType

# Value of closure inputs; connecting nothing is the same as leaving them out
NULL_CLOSURE = "null_closure()"

OSL_TYPE_NAMES = {
    DataType.FLOAT: "float",
    DataType.INTEGER: "int",
    DataType.BOOLEAN: "int",
    DataType.COLOR3: "color",
    DataType.COLOR4: "color4",
    DataType.VECTOR2: "vector2",
    DataType.VECTOR3: "vector",
    DataType.VECTOR4: "vector4",
    DataType.MATRIX33: "matrix",
    DataType.MATRIX44: "matrix",
    DataType.STRING: "string",
    DataType.FILENAME: "string",
}

CLOSURE_TYPE_NAME = "closure color"

# OSL keywords and reserved words
RESTRICTED_NAMES = frozenset({
    "and", "break", "closure", "color", "continue", "do", "else", "emit", "float",
    "for", "if", "illuminance", "illuminate", "int", "matrix", "normal", "not", "or",
    "output", "point", "public", "return", "string", "struct", "vector", "void", "while",
    "bool", "case", "catch", "char", "class", "const", "delete", "default", "double",
    "enum", "extern", "false", "friend", "goto", "inline", "long", "new", "operator",
    "private", "protected", "short", "signed", "sizeof", "static", "switch", "template",
    "this", "throw", "true", "try", "typedef", "uniform", "union", "unsigned", "varying",
    "virtual", "volatile",
})

_INVALID_CHARS = re.compile(r'[^a-zA-Z0-9_]')


class OslSyntax:
    """
    Formats types, values and identifiers for OSL shader network statements.

    Floats are always written in fixed notation so that output does not
    depend on the magnitude of a value.
    """
    def __init__(self, float_precision: int = 6):
        self.float_precision = float_precision

    def type_name(self, type_name: str) -> str:
        dtype = DataType.from_name(type_name)
        if dtype is None:
            return type_name
        if dtype.is_closure():
            return CLOSURE_TYPE_NAME
        return OSL_TYPE_NAMES[dtype]

    def make_valid_name(self, name: str) -> str:
        s = _INVALID_CHARS.sub('_', name)
        if not s:
            return "_"
        if s[0].isdigit():
            s = "_" + s
        if s in RESTRICTED_NAMES:
            s += "1"
        return s

    def make_unique_names(self, names: Iterable[str]) -> Dict[str, str]:
        """
        Map port names of one node to valid identifiers that do not collide.

        Names that are already valid keep their spelling. Renamed ones get a
        number appended until they are unique on the node.
        """
        names = list(names)
        used = {name for name in names if self.make_valid_name(name) == name}
        result = {}
        for name in names:
            base = candidate = self.make_valid_name(name)
            if candidate != name:
                count = 1
                while candidate in used:
                    count += 1
                    candidate = f"{base}_{count}"
                used.add(candidate)
            result[name] = candidate
        return result

    def format_float(self, value: Any) -> str:
        return f"{float(value):.{self.float_precision}f}"

    def format_value(self, value: Any, type_name: str) -> Optional[str]:
        """
        Format a literal for a 'param' statement.

        Returns None when there is no value to emit. Closure types always
        format to the null closure sentinel.
        """
        dtype = DataType.from_name(type_name)

        if dtype is not None and dtype.is_closure():
            return NULL_CLOSURE
        if value is None:
            return None

        if dtype is None:
            return self._format_untyped(value)

        if dtype.is_string():
            return self._quote(str(value))
        if dtype == DataType.BOOLEAN:
            return "1" if value else "0"
        if dtype == DataType.INTEGER:
            return str(int(value))
        if dtype == DataType.FLOAT:
            return self.format_float(value)

        # Tuple types; a scalar fills every component
        count = dtype.component_count()
        if isinstance(value, (list, tuple)):
            if len(value) != count:
                raise ValueError(f"Expected {count} components for {type_name}, got {value!r}")
            comps = value
        else:
            comps = [value] * count
        return " ".join(self.format_float(c) for c in comps)

    def _format_untyped(self, value: Any) -> str:
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return self.format_float(value)
        if isinstance(value, (list, tuple)):
            return " ".join(self.format_float(c) for c in value)
        return str(value)

    @staticmethod
    def _quote(text: str) -> str:
        escaped = text.replace('\\', '\\\\').replace('"', '\\"')
        return f'"{escaped}"'
