"""
Scalar coercion for ``get_scalar_value``.

Drivers hand back different Python types for the same SQL value (``COUNT``
is ``int`` everywhere, but ``SUM`` is ``Decimal`` on MySQL and PostgreSQL,
and booleans are ``0``/``1`` on SQLite and MySQL). Each requested type
accepts a fixed family of driver values and converts them losslessly;
anything outside the family raises ``TypeError`` or ``ValueError``.
"""

from decimal import Decimal
from typing import Any, Callable, Dict

from ..constants import ScalarType
from ..exceptions import UnsupportedTypeError

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

# Python types callers may pass instead of a ScalarType
_PYTHON_TYPE_ALIASES = {
    str: ScalarType.TEXT,
    int: ScalarType.INT64,
    float: ScalarType.FLOAT64,
    bool: ScalarType.BOOL,
}


def resolve_scalar_type(expected_type: Any) -> ScalarType:
    """
    Normalize ``expected_type`` to a ScalarType.

    Raises:
        UnsupportedTypeError: If the value names none of the five kinds
    """
    if isinstance(expected_type, ScalarType):
        return expected_type
    if isinstance(expected_type, type) and expected_type in _PYTHON_TYPE_ALIASES:
        return _PYTHON_TYPE_ALIASES[expected_type]
    if isinstance(expected_type, str):
        try:
            return ScalarType(expected_type.lower())
        except ValueError:
            pass
    raise UnsupportedTypeError(expected_type)


def _integral(value: Any, low: int, high: int) -> int:
    if isinstance(value, bool):
        result = int(value)
    elif isinstance(value, int):
        result = value
    elif isinstance(value, (float, Decimal)):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"{value!r} is not a finite number")
        if value != int(value):
            raise ValueError(f"{value!r} has a fractional part")
        result = int(value)
    else:
        raise TypeError(f"cannot read {type(value).__name__} as an integer")
    if not low <= result <= high:
        raise ValueError(f"{result} is out of range [{low}, {high}]")
    return result


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise TypeError(f"cannot read {type(value).__name__} as text")


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("cannot read bool as a floating point number")
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    raise TypeError(f"cannot read {type(value).__name__} as a floating point number")


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise TypeError(f"cannot read {value!r} as a boolean")


_CONVERTERS: Dict[ScalarType, Callable[[Any], Any]] = {
    ScalarType.TEXT: _to_text,
    ScalarType.INT32: lambda v: _integral(v, INT32_MIN, INT32_MAX),
    ScalarType.INT64: lambda v: _integral(v, INT64_MIN, INT64_MAX),
    ScalarType.FLOAT64: _to_float,
    ScalarType.BOOL: _to_bool,
}


def coerce_scalar(value: Any, scalar_type: ScalarType) -> Any:
    """
    Convert a driver value to ``scalar_type``. SQL NULL stays ``None``.

    Raises:
        TypeError: If the driver value is outside the accepted family
        ValueError: If the conversion would lose information
    """
    if value is None:
        return None
    return _CONVERTERS[scalar_type](value)
