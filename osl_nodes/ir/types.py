from enum import Enum
from typing import Any, Optional


class DataType(Enum):
    # Scalars
    FLOAT = "float"
    INTEGER = "integer"
    BOOLEAN = "boolean"

    # Tuples
    COLOR3 = "color3"
    COLOR4 = "color4"
    VECTOR2 = "vector2"
    VECTOR3 = "vector3"
    VECTOR4 = "vector4"
    MATRIX33 = "matrix33"
    MATRIX44 = "matrix44"

    # Strings
    STRING = "string"
    FILENAME = "filename"

    # Closures
    BSDF = "BSDF"
    EDF = "EDF"
    VDF = "VDF"
    SURFACESHADER = "surfaceshader"
    DISPLACEMENTSHADER = "displacementshader"
    VOLUMESHADER = "volumeshader"
    LIGHTSHADER = "lightshader"
    MATERIAL = "material"

    @classmethod
    def from_name(cls, name: str) -> Optional['DataType']:
        """Look up a MaterialX type name. Custom typedefs return None."""
        try:
            return cls(name)
        except ValueError:
            return None

    def is_closure(self):
        return self in {
            DataType.BSDF, DataType.EDF, DataType.VDF,
            DataType.SURFACESHADER, DataType.DISPLACEMENTSHADER,
            DataType.VOLUMESHADER, DataType.LIGHTSHADER, DataType.MATERIAL
        }

    def is_string(self):
        return self in {DataType.STRING, DataType.FILENAME}

    def component_count(self):
        if self == DataType.VECTOR2: return 2
        if self in {DataType.COLOR3, DataType.VECTOR3}: return 3
        if self in {DataType.COLOR4, DataType.VECTOR4}: return 4
        if self == DataType.MATRIX33: return 9
        if self == DataType.MATRIX44: return 16
        return 1

    def __str__(self):
        return self.value


def parse_value(type_name: str, text: Optional[str]) -> Any:
    """
    Convert a MaterialX value string into a Python value.

    Returns None for empty strings. Tuple types become tuples of floats,
    integers become int, booleans become bool. Strings and unknown types
    are returned unchanged.

    Raises:
        ValueError: if the string does not match the type
    """
    if text is None or text == "":
        return None

    dtype = DataType.from_name(type_name)
    if dtype is None or dtype.is_string() or dtype.is_closure():
        return text

    if dtype == DataType.BOOLEAN:
        lowered = text.strip().lower()
        if lowered not in ("true", "false"):
            raise ValueError(f"Invalid boolean value '{text}'")
        return lowered == "true"
    if dtype == DataType.INTEGER:
        return int(text.strip())
    if dtype == DataType.FLOAT:
        return float(text.strip())

    parts = [p.strip() for p in text.split(",")]
    if len(parts) != dtype.component_count():
        raise ValueError(
            f"Expected {dtype.component_count()} components for {type_name}, got '{text}'"
        )
    return tuple(float(p) for p in parts)
