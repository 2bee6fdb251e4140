"""
Primitive-Template Resolver

Maps any value to a fresh, empty instance of its primitive category.
None and UNDEFINED pass through unchanged. Nothing from the input value
is copied.
"""

from collections.abc import Callable
from typing import Any

from proxyshield.normalize.categories import (
    UNDEFINED,
    PrimitiveCategory,
    Symbol,
    classify,
)


class StringTemplate(str):
    """Empty string that can carry attributes."""
    pass


class NumberTemplate(float):
    """Zero-valued number that can carry attributes."""
    pass


class BigIntTemplate(int):
    """Zero-valued arbitrary-precision integer that can carry attributes."""
    pass


class BooleanTemplate(int):
    """False that can carry attributes (bool itself cannot be subclassed)."""

    def __new__(cls, value: Any = False):
        return super().__new__(cls, bool(value))

    def __repr__(self) -> str:
        return repr(bool(self))


class FunctionTemplate:
    """No-op callable that can carry attributes."""

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        return None

    def __repr__(self) -> str:
        return "<FunctionTemplate>"


_TEMPLATES: dict[PrimitiveCategory, Callable[[], Any]] = {
    PrimitiveCategory.STRING: StringTemplate,
    PrimitiveCategory.NUMBER: NumberTemplate,
    PrimitiveCategory.BOOLEAN: BooleanTemplate,
    PrimitiveCategory.SYMBOL: Symbol,
    PrimitiveCategory.FUNCTION: FunctionTemplate,
    PrimitiveCategory.OBJECT: dict,
    PrimitiveCategory.BIGINT: BigIntTemplate,
}


def resolve(value: Any) -> Any:
    """
    Return an empty template of the value's primitive category.

    Args:
        value: Any value, including shielded proxies.

    Returns:
        None or UNDEFINED unchanged, otherwise a new template instance.
    """
    category = classify(value)

    if category in (PrimitiveCategory.NULL, PrimitiveCategory.UNDEFINED):
        return value

    factory = _TEMPLATES.get(category)
    if factory is None:
        # unreachable for categories classify() can produce
        return UNDEFINED
    return factory()


to_primitive = resolve
