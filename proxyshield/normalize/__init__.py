"""
ProxyShield Normalization

Primitive-template resolution and cleansing of foreign or shielded
values back toward plain primitive-derived shapes.
"""
