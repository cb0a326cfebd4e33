"""
Tooltip content for nodes and links.

History parsing comes in two flavours:
- parse_history() is strict and raises MalformedHistoryError
- summarize_history() never raises; a bad history becomes a notice
Tooltip assembly only ever uses the fail-soft one.
"""

import html
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, List, Optional, Tuple

from ..domain.enums import NodeStatus, TooltipKind
from ..domain.errors import MalformedHistoryError
from ..domain.models import ExecutionPayload, GraphLink, GraphNode, HistoryEntry

logger = logging.getLogger(__name__)

HISTORY_NOTICE = "Unable to parse history"
NOT_AVAILABLE = "N/A"
LINK_HEADER = "Connection Details"

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# .NET backends send 7 fractional digits; fromisoformat accepts at most 6
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


# -----------------------------------------------------------------------------
# History
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class HistoryView:
    """Parsed history, or a notice explaining why there is none."""
    entries: Tuple[HistoryEntry, ...] = ()
    notice: Optional[str] = None


def _first(item: dict, *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None


def _history_entry(item: Any, position: int) -> HistoryEntry:
    if not isinstance(item, dict):
        raise MalformedHistoryError(
            f"history item {position} must be an object, got {type(item).__name__}"
        )

    total_tokens = None
    metadata = _first(item, "Metadata", "metadata")
    if isinstance(metadata, dict):
        usage = _first(metadata, "Usage", "usage")
        if isinstance(usage, dict):
            tokens = _first(usage, "TotalTokenCount", "total_tokens")
            if isinstance(tokens, int) and not isinstance(tokens, bool):
                total_tokens = tokens
        finish_reason = _first(metadata, "FinishReason", "finish_reason")
    else:
        finish_reason = None

    entry_id = _first(item, "id", "Id")
    return HistoryEntry(
        author=str(_first(item, "AuthorName", "author") or "Unknown"),
        content=str(_first(item, "Content", "content") or ""),
        model_id=str(_first(item, "ModelId", "modelId", "model_id") or NOT_AVAILABLE),
        entry_id=str(entry_id) if entry_id is not None else None,
        finish_reason=str(finish_reason) if finish_reason is not None else None,
        total_tokens=total_tokens,
    )


def parse_history(raw: Any) -> List[HistoryEntry]:
    """
    Parse a serialized execution history.

    Args:
        raw: JSON string (or an already decoded list); None/"" means no history

    Returns:
        History entries in their original order

    Raises:
        MalformedHistoryError: If raw is not JSON, not a list, or holds
            non-object items
    """
    if raw is None or raw == "":
        return []

    if isinstance(raw, (str, bytes, bytearray)):
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise MalformedHistoryError(f"history is not valid JSON: {e}") from e
    else:
        data = raw

    if not isinstance(data, list):
        raise MalformedHistoryError(f"history must be a list, got {type(data).__name__}")

    return [_history_entry(item, i) for i, item in enumerate(data)]


def summarize_history(raw: Any) -> HistoryView:
    """Fail-soft history parsing for display."""
    try:
        return HistoryView(entries=tuple(parse_history(raw)))
    except MalformedHistoryError as e:
        logger.debug("Showing history notice instead of entries: %s", e)
        return HistoryView(notice=HISTORY_NOTICE)


# -----------------------------------------------------------------------------
# Formatting
# -----------------------------------------------------------------------------

def format_status(status: NodeStatus) -> str:
    return status.display_name


def _parse_run_on(value: str) -> Optional[datetime]:
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(r"\1", text)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _parse_epoch(value: float, tz: Optional[tzinfo]) -> Optional[datetime]:
    # Values this large are milliseconds
    seconds = value / 1000 if abs(value) >= 1e11 else value
    try:
        return datetime.fromtimestamp(seconds, tz)
    except (OverflowError, OSError, ValueError):
        return None


def format_datetime(dt: datetime) -> str:
    """Render like `Oct 5, 2024, 3:04:05 PM`."""
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return (
        f"{MONTH_ABBR[dt.month - 1]} {dt.day}, {dt.year}, "
        f"{hour}:{dt.minute:02d}:{dt.second:02d} {suffix}"
    )


def format_timestamp(payload: ExecutionPayload, tz: Optional[tzinfo] = None) -> str:
    """
    Human-readable run time of an execution.

    Uses run_on, falling back to the numeric timestamp. Aware times are
    shown in tz (local time if None). Returns "N/A" if neither parses.
    """
    dt = None
    if payload.run_on:
        dt = _parse_run_on(payload.run_on)
    if dt is None and payload.timestamp is not None:
        dt = _parse_epoch(payload.timestamp, tz)
    if dt is None:
        return NOT_AVAILABLE

    if dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return format_datetime(dt)


# -----------------------------------------------------------------------------
# Tooltip content
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TooltipContent:
    """Toolkit-neutral tooltip body."""
    kind: TooltipKind
    header: str
    meta: Tuple[str, ...] = ()
    description: Optional[str] = None
    history: Tuple[HistoryEntry, ...] = ()
    history_notice: Optional[str] = None

    def to_text(self) -> str:
        lines = [self.header, *self.meta]
        if self.description:
            lines.append(self.description)
        for entry in self.history:
            lines.append(f"{entry.author}: {entry.content}")
            lines.append(f"  Model: {entry.model_id}")
        if self.history_notice:
            lines.append(self.history_notice)
        return "\n".join(lines)

    def to_html(self) -> str:
        esc = html.escape
        parts = [f'<div class="tooltip-header"><h3>{esc(self.header)}</h3></div>']
        parts.append('<div class="tooltip-content">')
        if self.meta:
            spans = "".join(f"<span>{esc(m)}</span>" for m in self.meta)
            parts.append(f'<div class="tooltip-meta">{spans}</div>')
        if self.description:
            parts.append(f'<div class="tooltip-description">{esc(self.description)}</div>')
        if self.history_notice:
            parts.append(f'<div class="tooltip-history">{esc(self.history_notice)}</div>')
        elif self.history:
            parts.append('<div class="tooltip-history">')
            for entry in self.history:
                model = f"Model: {entry.model_id}"
                if entry.total_tokens is not None:
                    model += f" ({entry.total_tokens} tokens)"
                parts.append(
                    '<div class="tooltip-history-item">'
                    f'<div class="tooltip-history-author">{esc(entry.author)}</div>'
                    f'<div class="tooltip-history-content">{esc(entry.content)}</div>'
                    f'<div class="tooltip-history-model">{esc(model)}</div>'
                    '</div>'
                )
            parts.append('</div>')
        parts.append('</div>')
        return "".join(parts)


def build_node_tooltip(node: GraphNode, tz: Optional[tzinfo] = None) -> TooltipContent:
    """Label, status, run time, description and history of a node."""
    history = summarize_history(node.payload.history_raw)
    return TooltipContent(
        kind=TooltipKind.NODE,
        header=node.label,
        meta=(
            f"Status: {format_status(node.status)}",
            format_timestamp(node.payload, tz),
        ),
        description=node.description or None,
        history=history.entries,
        history_notice=history.notice,
    )


def build_link_tooltip(link: GraphLink) -> TooltipContent:
    """Resolved endpoint labels of a link."""
    source = link.source.label if link.source is not None else link.source_id
    target = link.target.label if link.target is not None else link.target_id
    return TooltipContent(
        kind=TooltipKind.LINK,
        header=LINK_HEADER,
        meta=(f"From: {source}", f"To: {target}"),
    )
