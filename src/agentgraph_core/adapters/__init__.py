"""
Adapters (implementations) for the agent graph core ports.
"""

from .http_data_source import HttpExecutionSource
from .memory_data_source import InMemoryExecutionSource, build_demo_source

__all__ = [
    "HttpExecutionSource",
    "InMemoryExecutionSource",
    "build_demo_source",
]
