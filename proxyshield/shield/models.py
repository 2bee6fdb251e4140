"""
Interception Models

Pydantic models for interception policies and the events a tracing
policy records.
"""

from collections.abc import Callable
from datetime import datetime, UTC
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class InterceptionEvent(str, Enum):
    """Operations a policy intercepts."""

    GET = "get"
    """Property read (attribute or item)."""

    SET = "set"
    """Property write (attribute or item)."""

    DELETE = "delete"
    """Property deletion (attribute or item)."""

    HAS = "has"
    """Existence check (the `in` operator)."""


class InterceptionPolicy(BaseModel):
    """
    Immutable record of the four handlers a proxy dispatches to.

    Every handler receives the unwrapped target first:
        get(target, key) -> value
        set(target, key, value) -> bool
        delete(target, key) -> bool
        has(target, key) -> bool
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        default="shielded",
        description="Label used in logs"
    )

    get: Callable[[Any, Any], Any] = Field(
        description="Handler for property reads"
    )

    set: Callable[[Any, Any, Any], bool] = Field(
        description="Handler for property writes"
    )

    delete: Callable[[Any, Any], bool] = Field(
        description="Handler for property deletion"
    )

    has: Callable[[Any, Any], bool] = Field(
        description="Handler for existence checks"
    )

    def handler(self, event: InterceptionEvent) -> Callable[..., Any]:
        """Return the handler registered for an event."""
        return getattr(self, InterceptionEvent(event).value)


class ProxyEvent(BaseModel):
    """
    Event representing one intercepted operation.

    Recorded by tracing policies for logging and analysis.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this event"
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the operation occurred"
    )

    event: InterceptionEvent = Field(
        description="Kind of intercepted operation"
    )

    target_type: str = Field(
        description="Type name of the unwrapped target"
    )

    key: str = Field(
        description="repr() of the property key"
    )

    value: str | None = Field(
        default=None,
        description="repr() of the written or returned value"
    )

    success: bool = Field(
        default=True,
        description="Whether the operation succeeded"
    )

    error_message: str | None = Field(
        default=None,
        description="Error message if the operation failed"
    )
