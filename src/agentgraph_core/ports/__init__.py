"""
Ports (interfaces) for the agent graph core.

These define the contracts that adapters must implement.
This enables dependency injection and testing with fakes.
"""

from .data_source_port import ExecutionDataSource

__all__ = ["ExecutionDataSource"]
