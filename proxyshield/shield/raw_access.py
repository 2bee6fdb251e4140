"""
Raw Property Access

Reads, writes, soft-deletes and existence checks that work directly on
an object's own storage. None of them goes through attribute or item
syntax, so getters, setters, properties and __getattribute__/__setattr__/
__getitem__/__setitem__/__delitem__/__contains__ overrides never run.

Own storage is:
- the entries of a dict (or dict subclass), read with the base dict methods
- the entries of a read-only mapping (types.MappingProxyType)
- the positions of a list or tuple, keyed by index
- otherwise the instance __dict__ plus any initialised __slots__

Every entry of a mapping or sequence is enumerable. For instance storage,
names starting with the configured private prefix are not.

Raw operations applied to a ShieldedProxy act on the proxy's target
without going through the proxy's policy.
"""

from collections.abc import Iterator
from types import GetSetDescriptorType, MappingProxyType, MemberDescriptorType
from typing import Any

from structlog import get_logger

from proxyshield.config import get_settings
from proxyshield.shield.errors import MissingPropertyError

logger = get_logger(__name__)

_ABSENT = object()

_ENTRY_STORAGE = (dict, MappingProxyType, list, tuple)
_DICT_DESCRIPTORS = (GetSetDescriptorType, MemberDescriptorType)
_CLASS_NAMESPACE = type.__dict__["__dict__"]


# =========================================================================
# Storage Helpers
# =========================================================================

def _owner(obj: Any) -> Any:
    """Follow shielded proxies down to the object that owns the storage."""
    from proxyshield.shield.proxy import unwrap

    return unwrap(obj)


def _namespace(cls: type) -> MappingProxyType:
    # Bypasses any __dict__ override on a metaclass
    return _CLASS_NAMESPACE.__get__(cls, type)


def _instance_dict(obj: Any) -> Any:
    """
    Instance __dict__ read through the interpreter's own descriptor.

    A class-level __dict__ override (a property, for instance) is skipped
    and never runs. When the class that introduces the instance dict also
    shadows its descriptor, the dict cannot be reached and None is
    returned.
    """
    kind = type(obj)
    for cls in kind.__mro__:
        descriptor = _namespace(cls).get("__dict__")
        if isinstance(descriptor, _DICT_DESCRIPTORS):
            try:
                return descriptor.__get__(obj, kind)
            except (AttributeError, TypeError):
                return None
    return None


def _mangle(cls: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{cls.__name__.lstrip('_')}{name}"
    return name


def _slot_descriptors(kind: type) -> dict[str, MemberDescriptorType]:
    """Member descriptors for every __slots__ entry along the MRO."""
    slots: dict[str, MemberDescriptorType] = {}
    for cls in reversed(kind.__mro__):
        namespace = _namespace(cls)
        declared = namespace.get("__slots__", ())
        if isinstance(declared, str):
            declared = (declared,)
        for name in declared:
            if name in ("__dict__", "__weakref__"):
                continue
            attr = _mangle(cls, name)
            descriptor = namespace.get(attr)
            if isinstance(descriptor, MemberDescriptorType):
                slots[attr] = descriptor
    return slots


def _read_slot(obj: Any, descriptor: MemberDescriptorType) -> Any:
    try:
        return descriptor.__get__(obj, type(obj))
    except AttributeError:
        return _ABSENT


def _length(obj: Any) -> int:
    if isinstance(obj, list):
        return list.__len__(obj)
    return tuple.__len__(obj)


def _position(obj: Any, key: Any) -> int | None:
    """Index a sequence owns for key, or None."""
    if not isinstance(key, int) or isinstance(key, bool):
        return None
    index = int.__int__(key)
    if 0 <= index < _length(obj):
        return index
    return None


def _is_enumerable(kind: type, key: Any) -> bool:
    if issubclass(kind, _ENTRY_STORAGE):
        return True
    if isinstance(key, str):
        return not key.startswith(get_settings().private_prefix)
    return True


def has_own_storage(obj: Any) -> bool:
    """Whether the object has any storage raw operations can reach."""
    obj = _owner(obj)
    kind = type(obj)
    if issubclass(kind, _ENTRY_STORAGE):
        return True
    return _instance_dict(obj) is not None or bool(_slot_descriptors(kind))


# =========================================================================
# Key Enumeration
# =========================================================================

def own_keys(obj: Any) -> list[Any]:
    """
    Complete list of keys the object owns.

    Includes private-by-convention names and symbol keys. Class
    attributes, properties and anything inherited are never included.
    """
    obj = _owner(obj)
    kind = type(obj)

    if issubclass(kind, dict):
        return list(dict.keys(obj))
    if issubclass(kind, MappingProxyType):
        return list(MappingProxyType.keys(obj))
    if issubclass(kind, (list, tuple)):
        return list(range(_length(obj)))

    keys: list[Any] = []
    storage = _instance_dict(obj)
    if storage is not None:
        keys.extend(storage.keys())
    for attr, descriptor in _slot_descriptors(kind).items():
        if _read_slot(obj, descriptor) is not _ABSENT:
            keys.append(attr)
    return keys


def enumerable_items(obj: Any) -> Iterator[tuple[Any, Any]]:
    """Yield (key, value) for each enumerable own property, in key order."""
    owner = _owner(obj)
    kind = type(owner)
    for key in own_keys(owner):
        if _is_enumerable(kind, key):
            yield key, raw_get(owner, key)


# =========================================================================
# Raw Operations
# =========================================================================

def raw_get(obj: Any, key: Any) -> Any:
    """
    Return the value stored under an own key without running any getter.

    Raises:
        MissingPropertyError: If the object does not own the key.
    """
    obj = _owner(obj)
    kind = type(obj)

    if issubclass(kind, dict):
        # dict.get never consults __missing__
        value = dict.get(obj, key, _ABSENT)
    elif issubclass(kind, MappingProxyType):
        value = MappingProxyType.get(obj, key, _ABSENT)
    elif issubclass(kind, (list, tuple)):
        index = _position(obj, key)
        if index is None:
            value = _ABSENT
        elif issubclass(kind, list):
            value = list.__getitem__(obj, index)
        else:
            value = tuple.__getitem__(obj, index)
    else:
        value = _ABSENT
        storage = _instance_dict(obj)
        if storage is not None:
            value = storage.get(key, _ABSENT)
        if value is _ABSENT and isinstance(key, str):
            descriptor = _slot_descriptors(kind).get(key)
            if descriptor is not None:
                value = _read_slot(obj, descriptor)

    if value is _ABSENT:
        raise MissingPropertyError(key, owner=kind.__name__)
    return value


def raw_set(obj: Any, key: Any, value: Any) -> bool:
    """
    Store a value as a plain data entry without running any setter.

    Lists accept writes to existing positions only; their length is
    fixed as far as raw access is concerned. Tuples accept nothing.

    Returns:
        True if the value was stored, False if the target's storage is
        read-only or has no room for a new key.
    """
    obj = _owner(obj)
    kind = type(obj)

    if issubclass(kind, dict):
        dict.__setitem__(obj, key, value)
        return True
    if issubclass(kind, MappingProxyType):
        return _reject(kind, key, "read_only_mapping")
    if issubclass(kind, tuple):
        return _reject(kind, key, "read_only_sequence")
    if issubclass(kind, list):
        index = _position(obj, key)
        if index is None:
            return _reject(kind, key, "not_extensible")
        list.__setitem__(obj, index, value)
        return True

    if isinstance(key, str):
        descriptor = _slot_descriptors(kind).get(key)
        if descriptor is not None:
            descriptor.__set__(obj, value)
            return True

    storage = _instance_dict(obj)
    if storage is None:
        return _reject(kind, key, "not_extensible")
    if not isinstance(storage, dict):
        return _reject(kind, key, "read_only_mapping")

    dict.__setitem__(storage, key, value)
    return True


def raw_soft_delete(obj: Any, key: Any) -> bool:
    """
    Replace an own value with None instead of removing the key.

    A real deletion would fire __delattr__/__delitem__ hooks; overwriting
    the value does not. The key stays in own_keys() afterwards.
    """
    return raw_set(obj, key, None)


def raw_has(obj: Any, key: Any) -> bool:
    """Check whether the object owns a key. Never consults the class."""
    owner = _owner(obj)
    if issubclass(type(owner), (list, tuple)):
        return _position(owner, key) is not None
    return key in own_keys(owner)


def _reject(kind: type, key: Any, reason: str) -> bool:
    logger.debug(
        "raw_write_rejected",
        target_type=kind.__name__,
        key=repr(key),
        reason=reason,
    )
    return False
