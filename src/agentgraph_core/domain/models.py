"""
Domain models (DTOs) for the agent graph.

These are pure data classes with no rendering or network dependencies.
Records (NodeRecord, LinkRecord, FetchedPage) are immutable values as they
arrive from a data source. GraphNode and GraphLink carry the live layout
state that the LayoutEngine owns and mutates.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple

from .enums import NodeStatus


Point = Tuple[float, float]


# -----------------------------------------------------------------------------
# Execution payload
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExecutionPayload:
    """
    The agent execution record attached to a node.

    Known keys get named fields; anything else the backend sends is kept
    untouched in `extra`.
    """
    execution_id: Optional[str] = None
    group_id: Optional[str] = None
    run_status: Optional[str] = None
    run_on: Optional[str] = None          # ISO 8601 string as sent by the API
    timestamp: Optional[float] = None     # Epoch seconds or milliseconds
    description: Optional[str] = None
    history_raw: Any = None               # Usually a JSON string
    operation_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    # Wire key -> field name
    KNOWN_KEYS = {
        "id": "execution_id",
        "agent_group_id": "group_id",
        "run_status": "run_status",
        "run_on": "run_on",
        "timestamp": "timestamp",
        "description": "description",
        "agent_execution_history": "history_raw",
        "app_insight_operation_id": "operation_id",
    }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ExecutionPayload":
        """
        Build a payload from the raw `data` object of a node.

        Raises:
            ValueError: If data is neither None nor a mapping, or a known
                field has the wrong type.
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"execution payload must be an object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            name = cls.KNOWN_KEYS.get(key)
            if name is None:
                extra[key] = value
            else:
                values[name] = value

        timestamp = values.get("timestamp")
        if timestamp is not None:
            if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
                raise ValueError(f"timestamp must be numeric, got {timestamp!r}")
            values["timestamp"] = float(timestamp)

        for name in ("execution_id", "group_id", "run_status", "run_on",
                     "description", "operation_id"):
            value = values.get(name)
            if value is not None and not isinstance(value, str):
                values[name] = str(value)

        return cls(extra=extra, **values)


@dataclass(frozen=True)
class HistoryEntry:
    """One message in an execution's history."""
    author: str
    content: str
    model_id: str
    entry_id: Optional[str] = None
    finish_reason: Optional[str] = None
    total_tokens: Optional[int] = None


# -----------------------------------------------------------------------------
# Records from the data source
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeRecord:
    """A node as delivered by the data source."""
    node_id: str
    label: str
    status: str
    payload: ExecutionPayload = field(default_factory=ExecutionPayload)
    order: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any], order: int = 0) -> "NodeRecord":
        """
        Build a record from a node object of the page envelope.

        Raises:
            ValueError: If the object has no usable id or a bad payload.
        """
        if not isinstance(data, dict):
            raise ValueError(f"node must be an object, got {type(data).__name__}")

        node_id = data.get("id")
        if node_id is None or node_id == "":
            raise ValueError("node is missing 'id'")
        node_id = str(node_id)

        payload_data = data.get("data")
        # Some backends put the description on the node instead of the payload
        if data.get("description") and isinstance(payload_data, dict):
            payload_data = {"description": data["description"], **payload_data}
        elif data.get("description") and payload_data is None:
            payload_data = {"description": data["description"]}
        payload = ExecutionPayload.from_dict(payload_data)

        status = data.get("status")
        if status is None:
            status = payload.run_status or NodeStatus.UNKNOWN.value

        raw_order = data.get("order", order)
        try:
            order = int(raw_order)
        except (TypeError, ValueError):
            raise ValueError(f"node {node_id!r} has a non-integer order {raw_order!r}")

        return cls(
            node_id=node_id,
            label=str(data.get("label") or node_id),
            status=str(status),
            payload=payload,
            order=order,
        )


@dataclass(frozen=True)
class LinkRecord:
    """A directed link between two node ids."""
    source: str
    target: str
    link_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LinkRecord":
        """
        Build a record from a link object of the page envelope.

        Raises:
            ValueError: If source or target is missing.
        """
        if not isinstance(data, dict):
            raise ValueError(f"link must be an object, got {type(data).__name__}")

        source = data.get("source")
        target = data.get("target")
        # Resolved endpoints may come back as node objects
        if isinstance(source, dict):
            source = source.get("id")
        if isinstance(target, dict):
            target = target.get("id")
        if source is None or target is None:
            raise ValueError("link is missing 'source' or 'target'")

        link_id = data.get("id")
        return cls(
            source=str(source),
            target=str(target),
            link_id=str(link_id) if link_id is not None else None,
        )


@dataclass(frozen=True)
class FetchedPage:
    """One page of graph data as returned by a data source."""
    nodes: Tuple[NodeRecord, ...] = ()
    links: Tuple[LinkRecord, ...] = ()
    has_more: bool = False
    total_pages: int = 1

    @classmethod
    def from_envelope(cls, data: Any) -> "FetchedPage":
        """
        Validate and convert a decoded JSON page envelope.

        Expected shape: {nodes: [...], links: [...], hasMore, totalPages}.

        Raises:
            ValueError: On any shape violation.
        """
        if not isinstance(data, dict):
            raise ValueError(f"page envelope must be an object, got {type(data).__name__}")

        raw_nodes = data.get("nodes", [])
        raw_links = data.get("links", [])
        if not isinstance(raw_nodes, list):
            raise ValueError("'nodes' must be a list")
        if not isinstance(raw_links, list):
            raise ValueError("'links' must be a list")

        nodes = tuple(NodeRecord.from_dict(n, order=i) for i, n in enumerate(raw_nodes))
        links = tuple(LinkRecord.from_dict(link) for link in raw_links)

        total_pages = data.get("totalPages") or 1
        try:
            total_pages = max(1, int(total_pages))
        except (TypeError, ValueError):
            raise ValueError(f"'totalPages' must be an integer, got {total_pages!r}")

        return cls(
            nodes=nodes,
            links=links,
            has_more=bool(data.get("hasMore", False)),
            total_pages=total_pages,
        )


# -----------------------------------------------------------------------------
# Live graph state
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class GraphNode:
    """
    A node with layout state.

    Position is None until the engine seeds it. fx/fy hold the pin target
    while the node is dragged.
    """
    node_id: str
    label: str
    status: NodeStatus
    payload: ExecutionPayload = field(default_factory=ExecutionPayload)
    order: int = 0

    # Layout state (owned by the LayoutEngine)
    x: Optional[float] = None
    y: Optional[float] = None
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None
    index: int = -1

    @classmethod
    def from_record(cls, record: NodeRecord) -> "GraphNode":
        return cls(
            node_id=record.node_id,
            label=record.label,
            status=NodeStatus.from_value(record.status),
            payload=record.payload,
            order=record.order,
        )

    @property
    def pinned(self) -> bool:
        return self.fx is not None and self.fy is not None

    @property
    def position(self) -> Optional[Point]:
        if self.x is None or self.y is None:
            return None
        return (self.x, self.y)

    @property
    def description(self) -> Optional[str]:
        return self.payload.description


@dataclass(eq=False)
class GraphLink:
    """
    A directed link. After seeding, source/target point at the live
    GraphNode objects, so link geometry follows node movement.
    """
    source_id: str
    target_id: str
    link_id: str
    source: Optional[GraphNode] = None
    target: Optional[GraphNode] = None
    index: int = -1

    # Rank among links joining the same unordered pair (or loops on one node)
    parallel_rank: int = 0
    parallel_count: int = 1

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.target_id

    @property
    def resolved(self) -> bool:
        return self.source is not None and self.target is not None


@dataclass(frozen=True)
class DatasetSnapshot:
    """
    One page of graph data, ready for layout.

    A snapshot fully replaces the previous one; nothing is merged across
    pages.
    """
    nodes: Tuple[GraphNode, ...]
    links: Tuple[GraphLink, ...]
    has_more: bool
    page_index: int
    total_pages: int = 1
    group_id: Optional[str] = None

    @classmethod
    def from_page(
        cls,
        page: FetchedPage,
        page_index: int,
        group_id: Optional[str] = None,
    ) -> "DatasetSnapshot":
        """Build fresh GraphNode/GraphLink objects from a fetched page."""
        nodes = tuple(GraphNode.from_record(r) for r in page.nodes)

        links: List[GraphLink] = []
        seen: Dict[Tuple[str, str], int] = {}
        for record in page.links:
            key = (record.source, record.target)
            occurrence = seen.get(key, 0)
            seen[key] = occurrence + 1
            link_id = record.link_id or f"{record.source}->{record.target}#{occurrence}"
            links.append(GraphLink(
                source_id=record.source,
                target_id=record.target,
                link_id=link_id,
            ))

        return cls(
            nodes=nodes,
            links=tuple(links),
            has_more=page.has_more,
            page_index=page_index,
            total_pages=page.total_pages,
            group_id=group_id,
        )

    @classmethod
    def empty(cls, page_index: int = 1) -> "DatasetSnapshot":
        return cls(nodes=(), links=(), has_more=False, page_index=page_index)


# -----------------------------------------------------------------------------
# Geometry values
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ViewportSize:
    """Size of the render surface in screen pixels."""
    width: float
    height: float

    @property
    def center(self) -> Point:
        return (self.width / 2, self.height / 2)

    @property
    def min_side(self) -> float:
        return min(self.width, self.height)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle (x, y is the top-left corner)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def top_center(self) -> Point:
        return (self.x + self.width / 2, self.y)


@dataclass(frozen=True)
class NodeFrame:
    """Render data for one node on one tick."""
    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class LinkFrame:
    """Render data for one link on one tick, in world coordinates."""
    link_id: str
    source_id: str
    target_id: str
    path_points: Tuple[Point, ...]


@dataclass(frozen=True)
class RenderFrame:
    """Everything a renderer needs to draw one tick."""
    nodes: Tuple[NodeFrame, ...] = ()
    links: Tuple[LinkFrame, ...] = ()
    alpha: float = 0.0
    tick: int = 0

    def node(self, node_id: str) -> Optional[NodeFrame]:
        for frame in self.nodes:
            if frame.node_id == node_id:
                return frame
        return None

    def link(self, link_id: str) -> Optional[LinkFrame]:
        for frame in self.links:
            if frame.link_id == link_id:
                return frame
        return None


def polyline_midpoint(points: Tuple[Point, ...]) -> Optional[Point]:
    """Point halfway along a polyline, measured by arc length."""
    if not points:
        return None
    if len(points) == 1:
        return points[0]

    lengths = [
        math.hypot(b[0] - a[0], b[1] - a[1])
        for a, b in zip(points, points[1:])
    ]
    total = sum(lengths)
    if total == 0:
        return points[0]

    remaining = total / 2
    for (a, b), length in zip(zip(points, points[1:]), lengths):
        if remaining <= length and length > 0:
            t = remaining / length
            return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
        remaining -= length
    return points[-1]
