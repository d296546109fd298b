"""Clock, canvas, heap, event log, RC outlet code words, rules and instance table for a small home-automation controller."""

__version__ = "0.1.0"