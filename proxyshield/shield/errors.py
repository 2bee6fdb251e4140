"""
Interception Errors

Exceptions raised by raw property access, the shielded proxy and the
cleanser. Each one also derives from the built-in exception Python code
would normally catch for the same situation.
"""

from typing import Any


class ProxyShieldError(Exception):
    """Base error for the interception layer."""
    pass


class MissingPropertyError(ProxyShieldError, AttributeError):
    """Raw read of a key the object does not own."""

    def __init__(self, key: Any, owner: str = "object"):
        self.key = key
        self.owner = owner
        super().__init__(f"{owner} has no own property {key!r}")


class InvalidTargetError(ProxyShieldError, TypeError):
    """Wrap attempted on a value with no own-property storage."""

    def __init__(self, value: Any):
        self.type_name = type(value).__name__
        super().__init__(
            f"Cannot shield a value of type {self.type_name}: it has no own-property storage"
        )


class NonConfigurableWriteError(ProxyShieldError, TypeError):
    """Write or soft delete rejected by the target's storage."""

    def __init__(self, key: Any, operation: str = "set"):
        self.key = key
        self.operation = operation
        super().__init__(f"'{operation}' on property {key!r} was rejected by the target")


class OverlayTargetError(ProxyShieldError, TypeError):
    """Cleanse attempted on a value with no overlay template."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Cannot overlay properties onto {value!r}")
