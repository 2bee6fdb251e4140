"""
Tests for the Shielded Proxy
"""

from collections import Counter

import pytest

from proxyshield.config import reset_settings
from proxyshield.normalize.categories import UNDEFINED, Symbol
from proxyshield.shield.errors import (
    InvalidTargetError,
    MissingPropertyError,
    NonConfigurableWriteError,
)
from proxyshield.shield.policy import build_policy
from proxyshield.shield.proxy import ShieldedProxy, is_structured, unwrap, wrap
from proxyshield.shield.raw_access import raw_get, raw_has, raw_set
from proxyshield.shield.tracing import trace


class Foreign:
    """Foreign object with counting hooks and an empty string form."""

    calls: Counter = Counter()

    def __str__(self):
        return ""

    def __repr__(self):
        type(self).calls["repr"] += 1
        return "Foreign()"

    def __getattribute__(self, name):
        type(self).calls["get"] += 1
        return object.__getattribute__(self, name)

    def __setattr__(self, name, value):
        type(self).calls["set"] += 1
        object.__setattr__(self, name, value)

    def __delattr__(self, name):
        type(self).calls["delete"] += 1
        object.__delattr__(self, name)


class Locked:
    """Slot-only object."""

    __slots__ = ("fixed",)

    def __init__(self):
        self.fixed = 1


@pytest.fixture
def foreign():
    """Create a foreign object and reset its hook counters."""
    obj = Foreign()
    Foreign.calls = Counter()
    return obj


class TestWrap:
    """Test suite for wrapping targets."""

    def test_wrap_returns_proxy(self):
        """Test that wrapping a dict yields a shielded proxy."""
        proxy = wrap({"a": 1})

        assert isinstance(proxy, ShieldedProxy)
        assert proxy.a == 1

    @pytest.mark.parametrize("value", [5, "x", 1.5, True, None, UNDEFINED, b"raw"])
    def test_wrap_rejects_primitives(self, value):
        """Test that primitive values cannot be wrapped."""
        with pytest.raises(InvalidTargetError):
            wrap(value)

    def test_wrap_rejects_symbols(self):
        """Test that symbols are primitives even though they have slots."""
        with pytest.raises(InvalidTargetError) as exc:
            wrap(Symbol("s"))

        assert isinstance(exc.value, TypeError)

    def test_structured_values(self, foreign):
        """Test which values count as structured."""
        assert is_structured({}) is True
        assert is_structured(foreign) is True
        assert is_structured(Locked()) is True
        assert is_structured(len) is False
        assert is_structured(lambda: None) is True
        assert is_structured(42) is False
        assert is_structured([1, 2]) is True
        assert is_structured(()) is True
        assert is_structured(object()) is False

    def test_invalid_target_message(self):
        """Test that the error names the missing storage, not a category."""
        with pytest.raises(InvalidTargetError) as exc:
            wrap(object())

        assert "no own-property storage" in str(exc.value)
        assert "primitive" not in str(exc.value)

    def test_wrap_list(self):
        """Test that a list is shielded by index with a fixed length."""
        target = [1, 2]
        proxy = wrap(target)

        assert proxy[0] == 1
        assert 1 in proxy
        assert 2 not in proxy

        proxy[1] = "b"
        assert target == [1, "b"]

        with pytest.raises(NonConfigurableWriteError):
            proxy[2] = 3
        assert proxy.set(2, 3) is False
        assert target == [1, "b"]

    def test_wrap_tuple_is_read_only(self):
        """Test that tuples can be shielded but not written."""
        proxy = wrap((1, 2))

        assert proxy[1] == 2
        assert proxy.set(0, 5) is False
        with pytest.raises(NonConfigurableWriteError):
            del proxy[0]

    def test_each_wrap_gets_its_own_policy(self):
        """Test that two wraps never share a policy record."""
        target = {}
        first = wrap(target)
        second = wrap(target)

        first_policy = object.__getattribute__(first, "_ShieldedProxy__policy")
        second_policy = object.__getattribute__(second, "_ShieldedProxy__policy")
        assert first_policy is not second_policy
        assert first_policy == second_policy


class TestShieldedOperations:
    """Operations through the hardened policy."""

    def test_round_trip_matches_raw_access(self):
        """Test get/set/delete/has through the proxy against raw access."""
        target = {}
        proxy = wrap(target)

        proxy.a = 1
        assert raw_get(target, "a") == 1
        assert proxy.a == raw_get(target, "a")

        proxy["b"] = 2
        assert proxy["b"] == 2
        assert ("b" in proxy) == raw_has(target, "b")

        del proxy.a
        assert "a" in proxy
        assert proxy.a is None
        assert raw_get(target, "a") is None

        del proxy["b"]
        assert raw_has(target, "b") is True

    def test_explicit_interface(self):
        """Test the explicit get/set/delete/has methods."""
        target = {"get": "value"}
        proxy = wrap(target)

        assert proxy.set("k", 1) is True
        assert proxy.get("k") == 1
        assert proxy.has("k") is True
        assert proxy.delete("k") is True
        assert proxy.get("k") is None
        # interface names resolve on the proxy, item syntax reaches the target
        assert proxy["get"] == "value"

    def test_no_target_hooks_run(self, foreign):
        """Test that proxied operations never reach the target's hooks."""
        proxy = wrap(foreign)

        proxy.a = 1
        _ = proxy.a
        _ = "a" in proxy
        del proxy.a

        assert Foreign.calls == Counter()
        assert raw_get(foreign, "a") is None

    def test_three_writes_scenario(self, foreign):
        """Test three writes through a counting wrapper around the shielded policy."""
        base = build_policy()
        handler_calls = Counter()

        def counting_set(target, key, value):
            handler_calls["set"] += 1
            return base.set(target, key, value)

        proxy = wrap(foreign, base.model_copy(update={"set": counting_set}))

        proxy.a = 1
        proxy.a = 2
        proxy.a = 3

        assert raw_get(foreign, "a") == 3
        assert handler_calls["set"] == 3
        assert Foreign.calls == Counter()

    def test_missing_attribute(self):
        """Test that reading an absent key propagates the raw error."""
        proxy = wrap({})

        with pytest.raises(MissingPropertyError):
            proxy.absent
        with pytest.raises(MissingPropertyError):
            proxy["absent"]

        assert hasattr(proxy, "absent") is False

    def test_target_is_not_reachable(self, foreign):
        """Test that the proxy's own storage is not exposed as attributes."""
        proxy = wrap(foreign)

        with pytest.raises(MissingPropertyError):
            proxy._ShieldedProxy__target
        with pytest.raises(AttributeError):
            proxy.__dict__

    def test_dunder_writes_are_refused(self):
        """Test that dunder names cannot be written through the proxy."""
        target = {}
        proxy = wrap(target)

        with pytest.raises(AttributeError):
            proxy.__class__ = dict

        assert target == {}

    def test_proxy_cannot_be_rebound(self):
        """Test that calling __init__ again cannot re-point a proxy."""
        target = {"a": 1}
        proxy = wrap(target)

        with pytest.raises(TypeError):
            proxy.__init__({"a": 2}, build_policy())
        with pytest.raises(TypeError):
            ShieldedProxy.__init__(proxy, {"a": 3}, build_policy())

        assert proxy.a == 1
        assert unwrap(proxy) is target

    def test_repr_does_not_call_target(self, foreign):
        """Test that repr(proxy) does not run the target's __repr__."""
        proxy = wrap(foreign)

        assert "Foreign" in repr(proxy)
        assert Foreign.calls["repr"] == 0


class TestRejectedWrites:
    """Writes rejected by the target's storage."""

    @pytest.fixture
    def lenient_writes(self, monkeypatch):
        """Disable strict write checking."""
        monkeypatch.setenv("PROXYSHIELD_STRICT_WRITES", "false")
        reset_settings()
        yield
        reset_settings()

    def test_rejected_write_raises(self):
        """Test that syntax writes surface rejection as a TypeError."""
        proxy = wrap(Locked())

        with pytest.raises(NonConfigurableWriteError) as exc:
            proxy.added = 1

        assert isinstance(exc.value, TypeError)
        assert exc.value.key == "added"

    def test_rejected_write_returns_false(self):
        """Test that the explicit method reports rejection as False."""
        proxy = wrap(Locked())

        assert proxy.set("added", 1) is False
        assert proxy.set("fixed", 2) is True
        assert proxy.fixed == 2

    def test_rejected_delete_raises(self):
        """Test that deleting from a read-only mapping is rejected."""
        class Plain:
            pass

        proxy = wrap(Plain)

        with pytest.raises(NonConfigurableWriteError):
            del proxy["__module__"]

    def test_lenient_mode_ignores_rejection(self, lenient_writes):
        """Test that non-strict mode drops rejected writes silently."""
        target = Locked()
        proxy = wrap(target)

        proxy.added = 1

        assert raw_has(target, "added") is False


class TestEscapeHatch:
    """Privileged raw access against wrapped values."""

    def test_raw_set_through_proxy_is_silent(self):
        """Test that raw_set on a proxy writes the target without tracing."""
        target = {}
        proxy, tracer = trace(target)

        proxy.a = 1
        assert raw_set(proxy, "asd", 4) is True

        assert target == {"a": 1, "asd": 4}
        assert tracer.stats["operation_count"] == 1

    def test_unwrap(self):
        """Test unwrapping nested proxies."""
        target = {}
        nested = wrap(wrap(target))

        nested.a = 1

        assert unwrap(nested) is target
        assert unwrap(target) is target
        assert target == {"a": 1}
