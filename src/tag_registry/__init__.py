"""Device tag registry.

Tag reconciliation, protocol address resolution and live value overlay for
configured field devices.
"""

__version__ = "1.0.0"
