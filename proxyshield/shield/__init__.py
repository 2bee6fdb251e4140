"""
ProxyShield Interception Layer

Raw property access that bypasses an object's own hooks, the policy
factory built on it, and the shielded proxy that hands foreign values
to untrusted code.
"""
