"""
ProxyShield

Hook-free property interception for hosting untrusted values.

    >>> from proxyshield import wrap, raw_get
    >>> target = {"a": 1}
    >>> shielded = wrap(target)
    >>> shielded.a = 2
    >>> raw_get(target, "a")
    2
"""

__version__ = "0.1.0"

from proxyshield.normalize.categories import UNDEFINED, PrimitiveCategory, Symbol, classify
from proxyshield.normalize.cleanser import clense
from proxyshield.normalize.resolver import resolve, to_primitive
from proxyshield.shield.errors import (
    InvalidTargetError,
    MissingPropertyError,
    NonConfigurableWriteError,
    OverlayTargetError,
    ProxyShieldError,
)
from proxyshield.shield.models import InterceptionEvent, InterceptionPolicy, ProxyEvent
from proxyshield.shield.policy import build_policy
from proxyshield.shield.proxy import ShieldedProxy, prevent_inject, unwrap, wrap
from proxyshield.shield.raw_access import (
    enumerable_items,
    own_keys,
    raw_get,
    raw_has,
    raw_set,
    raw_soft_delete,
)
from proxyshield.shield.tracing import TracingPolicy, trace

__all__ = [
    "__version__",
    # raw access
    "raw_get",
    "raw_set",
    "raw_soft_delete",
    "raw_has",
    "own_keys",
    "enumerable_items",
    # policy and wrapping
    "InterceptionEvent",
    "InterceptionPolicy",
    "build_policy",
    "ShieldedProxy",
    "wrap",
    "prevent_inject",
    "unwrap",
    # tracing
    "ProxyEvent",
    "TracingPolicy",
    "trace",
    # normalization
    "PrimitiveCategory",
    "Symbol",
    "UNDEFINED",
    "classify",
    "resolve",
    "to_primitive",
    "clense",
    # errors
    "ProxyShieldError",
    "MissingPropertyError",
    "InvalidTargetError",
    "NonConfigurableWriteError",
    "OverlayTargetError",
]
