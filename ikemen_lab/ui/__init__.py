"""Qt-facing helpers for IKEMEN Lab."""
