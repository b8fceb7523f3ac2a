"""Habito: personal self-tracking with persistent work timers."""

__version__ = "0.1.0"
