"""Command executors.

Code that runs processes depends on ``CommandExecutor`` only. Use the
factory functions to obtain an implementation.
"""

from .base import CommandExecutor
from .mock import CommandCall, Expectation, MockCommandExecutor
from .real import RealCommandExecutor


def create_real_executor() -> RealCommandExecutor:
    """Create an executor that runs OS processes."""
    return RealCommandExecutor()


def create_mock_executor() -> MockCommandExecutor:
    """Create a scripted executor for tests."""
    return MockCommandExecutor()


__all__ = [
    "CommandExecutor",
    "CommandCall",
    "Expectation",
    "MockCommandExecutor",
    "RealCommandExecutor",
    "create_mock_executor",
    "create_real_executor",
]
