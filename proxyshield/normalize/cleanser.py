"""
Cleanser

Rebuilds a value as its primitive template with the value's enumerable
own properties copied on top.
"""

from typing import Any

from structlog import get_logger

from proxyshield.normalize.categories import UNDEFINED
from proxyshield.normalize.resolver import resolve
from proxyshield.shield.errors import OverlayTargetError
from proxyshield.shield.raw_access import enumerable_items, raw_set

logger = get_logger(__name__)


def clense(obj: Any) -> Any:
    """
    Overlay obj's enumerable own properties onto resolve(obj).

    The copy is shallow and obj's values win. Shielded proxies are read
    through to their target without firing their policy.

    Raises:
        OverlayTargetError: If obj is None/UNDEFINED, or the template
            refuses one of the properties.
    """
    template = resolve(obj)
    if template is None or template is UNDEFINED:
        raise OverlayTargetError(obj)

    copied = 0
    for key, value in enumerable_items(obj):
        if not raw_set(template, key, value):
            raise OverlayTargetError(template)
        copied += 1

    logger.debug(
        "value_cleansed",
        source_type=type(obj).__name__,
        template_type=type(template).__name__,
        copied=copied,
    )
    return template
