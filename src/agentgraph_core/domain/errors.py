"""
Error taxonomy for the agent graph core.

Only DataFetchError is meant to reach the user. The others describe
conditions the core recovers from locally; they are still real exceptions
so they can be logged, counted and inspected in tests.
"""

from typing import Optional


class AgentGraphError(Exception):
    """Base class for all agent graph errors."""


class DataFetchError(AgentGraphError):
    """A page of graph data could not be fetched or decoded."""

    def __init__(
        self,
        message: str,
        group_id: Optional[str] = None,
        page_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.group_id = group_id
        self.page_index = page_index


class MalformedHistoryError(AgentGraphError):
    """The serialized execution history is not a list of history records."""


class UnknownLinkEndpointError(AgentGraphError):
    """A link references a node id that is not part of the dataset."""

    def __init__(self, source_id: str, target_id: str, missing: str):
        super().__init__(
            f"Link {source_id!r} -> {target_id!r} references unknown node {missing!r}"
        )
        self.source_id = source_id
        self.target_id = target_id
        self.missing = missing


class LayoutDivergenceError(AgentGraphError):
    """A simulation tick produced a non-finite node position."""

    def __init__(self, node_id: str, x: float, y: float):
        super().__init__(f"Node {node_id!r} diverged to ({x}, {y})")
        self.node_id = node_id
        self.x = x
        self.y = y
