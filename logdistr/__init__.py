"""Segmented append-only commit log with access control, an HTTP log server and host monitoring."""

__version__ = "0.1.0"