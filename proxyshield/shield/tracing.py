"""
Tracing Policy

A naive logging policy for debugging. Unlike the shielded policy it
performs each operation with ordinary attribute/item access, so the
target's own hooks DO run. It records every intercepted operation as a
ProxyEvent and logs it.

Delete and existence checks are only logged and reported as successful;
the target is not touched.
"""

from collections import Counter, deque
from collections.abc import Callable
from typing import Any

from structlog import get_logger

from proxyshield.config import get_settings
from proxyshield.shield.models import InterceptionEvent, InterceptionPolicy, ProxyEvent
from proxyshield.shield.proxy import ShieldedProxy, wrap

logger = get_logger(__name__)


def _uses_item_access(target: Any) -> bool:
    return isinstance(target, (dict, list, tuple))


class TracingPolicy:
    """
    Builds a logging policy and keeps the events it observes.

    Usage:
        tracer = TracingPolicy()
        proxy = wrap(obj, tracer.policy())
        proxy.a = 1
        print(tracer.stats)
    """

    def __init__(
        self,
        event_callback: Callable[[ProxyEvent], None] | None = None,
        max_events: int | None = None,
    ):
        """
        Initialize the tracer.

        Args:
            event_callback: Called with every recorded event.
            max_events: Events kept in memory (oldest dropped first).
        """
        self.event_callback = event_callback
        self.max_events = max_events or get_settings().trace_event_limit

        self._events: deque[ProxyEvent] = deque(maxlen=self.max_events)
        self._counts: Counter[InterceptionEvent] = Counter()

    def policy(self) -> InterceptionPolicy:
        """Return a policy whose handlers report to this tracer."""
        return InterceptionPolicy(
            name="tracing",
            get=self._get,
            set=self._set,
            delete=self._delete,
            has=self._has,
        )

    # =========================================================================
    # Handlers
    # =========================================================================

    def _get(self, target: Any, key: Any) -> Any:
        try:
            if _uses_item_access(target):
                value = target[key]
            else:
                value = getattr(target, key)
        except Exception as e:
            self._record(InterceptionEvent.GET, target, key, success=False, error=e)
            raise
        self._record(InterceptionEvent.GET, target, key, value=value)
        return value

    def _set(self, target: Any, key: Any, value: Any) -> bool:
        try:
            if _uses_item_access(target):
                target[key] = value
            else:
                setattr(target, key, value)
        except Exception as e:
            self._record(InterceptionEvent.SET, target, key, value=value, success=False, error=e)
            raise
        self._record(InterceptionEvent.SET, target, key, value=value)
        return True

    def _delete(self, target: Any, key: Any) -> bool:
        self._record(InterceptionEvent.DELETE, target, key)
        return True

    def _has(self, target: Any, key: Any) -> bool:
        self._record(InterceptionEvent.HAS, target, key)
        return True

    # =========================================================================
    # Recording
    # =========================================================================

    def _record(
        self,
        event: InterceptionEvent,
        target: Any,
        key: Any,
        value: Any = None,
        success: bool = True,
        error: Exception | None = None,
    ) -> None:
        self._counts[event] += 1

        record = ProxyEvent(
            event=event,
            target_type=type(target).__name__,
            key=repr(key),
            value=repr(value) if event in (InterceptionEvent.GET, InterceptionEvent.SET) else None,
            success=success,
            error_message=str(error) if error else None,
        )

        self._events.append(record)

        if self.event_callback:
            self.event_callback(record)

        log_method = logger.info if success else logger.warning
        log_method(
            "traced_operation",
            operation=event.value,
            key=record.key,
            value=record.value,
            success=success,
        )

    @property
    def events(self) -> list[ProxyEvent]:
        """Recorded events, oldest first."""
        return list(self._events)

    @property
    def stats(self) -> dict:
        """Get tracer statistics."""
        return {
            "operation_count": sum(self._counts.values()),
            **{event.value: self._counts[event] for event in InterceptionEvent},
        }


def trace(
    obj: Any,
    event_callback: Callable[[ProxyEvent], None] | None = None,
) -> tuple[ShieldedProxy, TracingPolicy]:
    """Wrap obj with a fresh tracing policy and return (proxy, tracer)."""
    tracer = TracingPolicy(event_callback=event_callback)
    return wrap(obj, tracer.policy()), tracer
