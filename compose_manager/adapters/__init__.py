"""Adapters — bindings to Docker and the filesystem.

Public re-exports for convenient access.
"""

from compose_manager.adapters.base import (
    ComposeScanner,
    LiveProjectProvider,
    QueryError,
    ScanError,
)
from compose_manager.adapters.mock import MockProjectProvider, MockScanner

__all__ = [
    "ComposeScanner",
    "LiveProjectProvider",
    "MockProjectProvider",
    "MockScanner",
    "QueryError",
    "ScanError",
]
