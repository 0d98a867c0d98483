"""Ports - interfaces/protocols for external dependencies."""

from .task_provider import TaskProvider

__all__ = [
    "TaskProvider",
]
