"""Herald: notification delivery and analytics engine."""

__version__ = "0.1.0"
