"""
Background worker threads for the agent graph app.

These QThread subclasses run network fetches without blocking the UI.
"""

from .fetch_worker import FetchWorker

__all__ = [
    "FetchWorker",
]
