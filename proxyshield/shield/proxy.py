"""
Shielded Proxy

Wraps a foreign value so that every read, write, delete and existence
check made through the wrapper is dispatched to an interception policy
instead of reaching the value's own hooks.
"""

from typing import Any, Generic, TypeVar

from structlog import get_logger

from proxyshield.config import get_settings
from proxyshield.normalize.categories import PrimitiveCategory, classify
from proxyshield.shield.errors import InvalidTargetError, NonConfigurableWriteError
from proxyshield.shield.models import InterceptionEvent, InterceptionPolicy
from proxyshield.shield.policy import build_policy
from proxyshield.shield.raw_access import has_own_storage

logger = get_logger(__name__)

T = TypeVar("T")

_TARGET_SLOT = "_ShieldedProxy__target"
_POLICY_SLOT = "_ShieldedProxy__policy"


def _is_dunder(name: Any) -> bool:
    return isinstance(name, str) and name.startswith("__") and name.endswith("__")


class ShieldedProxy(Generic[T]):
    """
    Wrapper that routes property operations through a policy.

    Python syntax maps onto the four policy events:
    - proxy.name / proxy[key]          -> get
    - proxy.name = v / proxy[key] = v  -> set
    - del proxy.name / del proxy[key]  -> delete
    - key in proxy                     -> has

    The explicit methods get/set/delete/has do the same and return the
    handler result unchanged. They are resolved on the proxy itself, as
    are dunder names; use item syntax to reach target keys with those
    names. The target is never reachable through attribute or item
    syntax on the proxy.

    Usage:
        proxy = wrap(foreign_value)
        proxy.counter = 1
        assert "counter" in proxy
    """

    __slots__ = ("__target", "__policy")

    _INTERFACE = frozenset({"get", "set", "delete", "has"})

    def __init__(self, target: T, policy: InterceptionPolicy):
        try:
            object.__getattribute__(self, _TARGET_SLOT)
        except AttributeError:
            pass
        else:
            logger.warning("proxy_rebind_refused")
            raise TypeError("ShieldedProxy is already bound to a target")
        object.__setattr__(self, _TARGET_SLOT, target)
        object.__setattr__(self, _POLICY_SLOT, policy)

    # =========================================================================
    # Policy Interface
    # =========================================================================

    def get(self, key: Any) -> Any:
        """Read a property through the policy."""
        target, policy = _parts(self)
        return policy.get(target, key)

    def set(self, key: Any, value: Any) -> bool:
        """Write a property through the policy."""
        target, policy = _parts(self)
        return policy.set(target, key, value)

    def delete(self, key: Any) -> bool:
        """Delete a property through the policy."""
        target, policy = _parts(self)
        return policy.delete(target, key)

    def has(self, key: Any) -> bool:
        """Check a property through the policy."""
        target, policy = _parts(self)
        return policy.has(target, key)

    # =========================================================================
    # Attribute Syntax
    # =========================================================================

    def __getattribute__(self, name: str) -> Any:
        if name in ShieldedProxy._INTERFACE or _is_dunder(name):
            return object.__getattribute__(self, name)
        return ShieldedProxy.get(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if _is_dunder(name):
            raise AttributeError(f"Cannot set {name!r} on a shielded proxy")
        _checked(InterceptionEvent.SET, name, ShieldedProxy.set(self, name, value))

    def __delattr__(self, name: str) -> None:
        if _is_dunder(name):
            raise AttributeError(f"Cannot delete {name!r} on a shielded proxy")
        _checked(InterceptionEvent.DELETE, name, ShieldedProxy.delete(self, name))

    # =========================================================================
    # Item Syntax
    # =========================================================================

    def __getitem__(self, key: Any) -> Any:
        return ShieldedProxy.get(self, key)

    def __setitem__(self, key: Any, value: Any) -> None:
        _checked(InterceptionEvent.SET, key, ShieldedProxy.set(self, key, value))

    def __delitem__(self, key: Any) -> None:
        _checked(InterceptionEvent.DELETE, key, ShieldedProxy.delete(self, key))

    def __contains__(self, key: Any) -> bool:
        return bool(ShieldedProxy.has(self, key))

    def __repr__(self) -> str:
        # Never calls the target's own __repr__
        target, policy = _parts(self)
        return f"<ShieldedProxy {type(target).__name__} policy={policy.name!r}>"


def _parts(proxy: ShieldedProxy) -> tuple[Any, InterceptionPolicy]:
    return (
        object.__getattribute__(proxy, _TARGET_SLOT),
        object.__getattribute__(proxy, _POLICY_SLOT),
    )


def _checked(event: InterceptionEvent, key: Any, accepted: Any) -> None:
    """Surface a rejected write made through Python syntax."""
    if accepted:
        return
    logger.warning(
        "proxy_write_rejected",
        operation=event.value,
        key=repr(key),
        strict=get_settings().strict_writes,
    )
    if get_settings().strict_writes:
        raise NonConfigurableWriteError(key, operation=event.value)


# =========================================================================
# Wrapping
# =========================================================================

_PRIMITIVE_CATEGORIES = frozenset({
    PrimitiveCategory.NULL,
    PrimitiveCategory.UNDEFINED,
    PrimitiveCategory.SYMBOL,
})


def is_structured(value: Any) -> bool:
    """Whether a value has own-property storage that can be shielded."""
    if classify(value) in _PRIMITIVE_CATEGORIES:
        return False
    return has_own_storage(value)


def wrap(obj: T, policy: InterceptionPolicy | None = None) -> ShieldedProxy[T]:
    """
    Wrap a foreign value in a shielded proxy.

    Args:
        obj: Structured value to wrap (dict, mapping proxy, list, tuple,
            or an object with an instance __dict__ or __slots__).
        policy: Policy to attach. A fresh build_policy() when omitted.

    Returns:
        ShieldedProxy: The value to hand to untrusted code.

    Raises:
        InvalidTargetError: If obj has no own-property storage.
    """
    if not is_structured(obj):
        raise InvalidTargetError(obj)

    if policy is None:
        policy = build_policy()

    logger.debug(
        "shielded_proxy_created",
        target_type=type(obj).__name__,
        policy=policy.name,
    )
    return ShieldedProxy(obj, policy)


prevent_inject = wrap


def unwrap(value: Any) -> Any:
    """
    Return the object behind any number of shielded proxies.

    Privileged: code holding this function can bypass every policy.
    """
    while issubclass(type(value), ShieldedProxy):
        value = object.__getattribute__(value, _TARGET_SLOT)
    return value
