"""Deferred and recurring tasks for todo.txt."""

__version__ = "0.1.0"
