"""
Primitive Categories

Closed classification of runtime values into the primitive categories
used by the template resolver.
"""

import numbers
from enum import Enum
from itertools import count
from typing import Any

# Largest integer a double represents exactly; beyond it ints are BIGINT
MAX_SAFE_INTEGER = 2**53 - 1


class PrimitiveCategory(str, Enum):
    """Primitive category a runtime value belongs to."""

    NULL = "null"
    UNDEFINED = "undefined"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SYMBOL = "symbol"
    FUNCTION = "function"
    OBJECT = "object"
    BIGINT = "bigint"


class _Undefined:
    """Marker for "no value at all", distinct from None."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()


class Symbol:
    """
    Unique opaque identifier usable as a property key.

    Two symbols are only ever equal when they are the same object, even
    if they share a description.
    """

    __slots__ = ("description", "_serial")
    _counter = count(1)

    def __init__(self, description: str | None = None):
        self.description = description
        self._serial = next(self._counter)

    def __repr__(self) -> str:
        if self.description is None:
            return f"Symbol(#{self._serial})"
        return f"Symbol({self.description!r})"


def classify(value: Any) -> PrimitiveCategory:
    """
    Classify a value into its primitive category.

    Only the value's type is inspected (plus the magnitude of plain ints),
    so classifying never runs hooks defined on the value itself.
    """
    if value is None:
        return PrimitiveCategory.NULL
    if value is UNDEFINED:
        return PrimitiveCategory.UNDEFINED

    kind = type(value)
    # bool before int: bool is an int subclass
    if issubclass(kind, bool):
        return PrimitiveCategory.BOOLEAN
    if issubclass(kind, int):
        if int.__abs__(value) <= MAX_SAFE_INTEGER:
            return PrimitiveCategory.NUMBER
        return PrimitiveCategory.BIGINT
    if issubclass(kind, numbers.Integral):
        return PrimitiveCategory.BIGINT
    if issubclass(kind, numbers.Number):
        return PrimitiveCategory.NUMBER
    if issubclass(kind, (str, bytes)):
        return PrimitiveCategory.STRING
    if issubclass(kind, Symbol):
        return PrimitiveCategory.SYMBOL
    if callable(value):
        return PrimitiveCategory.FUNCTION
    return PrimitiveCategory.OBJECT
