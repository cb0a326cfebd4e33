"""
Enumerations for the agent graph domain.
"""

from enum import Enum
from typing import Any


class NodeStatus(str, Enum):
    """Run status of an agent execution node."""
    SUCCESS = "success"
    RUNNING = "running"
    ERROR = "error"
    PENDING = "pending"
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: Any) -> "NodeStatus":
        """Map a raw status string to a status, case-insensitively."""
        if isinstance(value, NodeStatus):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN

        STATUS_ALIASES = {
            "succeeded": cls.SUCCESS, "completed": cls.SUCCESS,
            "failed": cls.ERROR, "failure": cls.ERROR,
            "in_progress": cls.RUNNING, "queued": cls.PENDING,
        }

        key = value.strip().lower()
        try:
            return cls(key)
        except ValueError:
            return STATUS_ALIASES.get(key, cls.UNKNOWN)

    @property
    def display_name(self) -> str:
        return self.value.title()


class NodeEmphasis(str, Enum):
    """Hover emphasis of a node. Never affects layout."""
    ACTIVE = "active"
    DIM = "dim"


class LinkStyle(str, Enum):
    """Hover styling of a link."""
    NORMAL = "normal"
    HIGHLIGHTED = "highlighted"


class TooltipKind(str, Enum):
    """What a tooltip describes."""
    NODE = "node"
    LINK = "link"
