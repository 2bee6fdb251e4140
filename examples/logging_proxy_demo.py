"""
Example Logging Proxy

A caller that builds its own naive logging policy instead of using the
shielded factory, then uses raw_set as a privileged escape hatch to
write to the already-wrapped object without being traced.
"""

from proxyshield import InterceptionPolicy, own_keys, raw_get, raw_set, wrap


class Foreign:
    """Object whose string form is empty."""

    def __str__(self):
        return ""


def build_logging_policy() -> InterceptionPolicy:
    """Policy that prints each operation and then performs it normally."""

    def get(target, key):
        print(f"get {key}")
        return getattr(target, key)

    def set(target, key, value):
        print(f"set {key} = {value}")
        setattr(target, key, value)
        return True

    def delete(target, key):
        print(f"delete {key}")
        return True

    def has(target, key):
        print(f"has {key}")
        return True

    return InterceptionPolicy(name="logging", get=get, set=set, delete=delete, has=has)


def main():
    a = Foreign()
    b = wrap(a, build_logging_policy())

    b.a = 1
    b.a = 2
    b.a = 3
    print(b, own_keys(a))

    # Not printed: raw operations skip the proxy's policy
    raw_set(b, "asd", 4)
    print(b, own_keys(a), raw_get(a, "asd"))


if __name__ == "__main__":
    main()
