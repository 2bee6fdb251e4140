"""
Interception Policy Factory

Builds the hardened policy whose handlers forward straight to the raw
property operations.
"""

from proxyshield.shield.models import InterceptionPolicy
from proxyshield.shield.raw_access import (
    raw_get,
    raw_has,
    raw_set,
    raw_soft_delete,
)


def build_policy() -> InterceptionPolicy:
    """
    Build a fresh shielded policy.

    The handlers are terminal: none of them uses attribute or item
    syntax on the target, so dispatching through them can never
    re-enter an interception hook. Each call returns a new record.
    """
    return InterceptionPolicy(
        name="shielded",
        get=raw_get,
        set=raw_set,
        delete=raw_soft_delete,
        has=raw_has,
    )
