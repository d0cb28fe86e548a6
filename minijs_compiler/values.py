import math
from typing import Any, Union

MiniJSValue = Union[float, str, bool, None]


def is_number(value: Any) -> bool:
    # bool is a subclass of int, but true and false are not numbers here.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: MiniJSValue) -> bool:
    """Evaluate the truthiness of a value.

    null, false, the number 0 and the empty string are falsy; everything else is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def is_equal(left: Any, right: Any) -> bool:
    """Values are equal only when they are of the same kind and hold the same value."""
    if left is None or right is None:
        return left is None and right is None
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value: MiniJSValue) -> str:
    """Represent a value in its natural text form, as used by string concatenation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if float(value).is_integer():
            return str(int(value))  # Output 30.0 as 30, etc.
        return repr(float(value))
    return str(value)


def render_value(value: MiniJSValue) -> str:
    """Like `stringify`, but strings are quoted so they stand out in a variable listing."""
    if isinstance(value, str):
        return f'"{value}"'
    return stringify(value)
