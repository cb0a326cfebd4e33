"""
QGraphicsItem subclasses for the agent graph.
"""

from .node_item import NodeItem
from .link_item import LinkItem

__all__ = ["NodeItem", "LinkItem"]
