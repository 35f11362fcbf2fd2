"""Scan, filter, lock and edit the memory of a running Linux process."""

__version__ = "0.1.0"