"""
Runtime value helpers shared by the interpreter, the printer and the driver.

Lox values are carried as plain Python objects:

    nil     -> None
    boolean -> bool
    number  -> float
    string  -> str

Python's ``bool`` is a subclass of ``int`` and ``True == 1.0`` holds, so every
helper here checks the value domain explicitly before comparing.
"""

import math
from typing import Any


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """``nil`` and ``false`` are falsy; everything else, ``0`` and ``""`` included, is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Lox equality: values from different domains are never equal."""
    if a is None or b is None:
        return a is None and b is None
    if is_number(a) and is_number(b):
        return bool(a == b)
    if type(a) is not type(b):
        return False
    return bool(a == b)


def stringify(value: Any) -> str:
    """Renders a runtime value the way Lox prints it.

    Examples:
        >>> stringify(None), stringify(True), stringify(3.0), stringify(2.5)
        ('nil', 'true', '3', '2.5')
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        number = float(value)
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        text = repr(number)
        return text[:-2] if text.endswith(".0") else text
    return str(value)


__all__ = ["is_equal", "is_number", "is_truthy", "stringify"]
