"""
HTTP data source adapter - fetches execution graph pages from the backend API.

Endpoint:
    GET {base_url}/agent-executions/{group_id}?page={page}

Response envelope:
    {"nodes": [...], "links": [...], "hasMore": bool, "totalPages": int}
"""

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Dict, Optional

from ..domain.errors import DataFetchError
from ..domain.models import FetchedPage
from ..ports.data_source_port import ExecutionDataSource

logger = logging.getLogger(__name__)


class HttpExecutionSource(ExecutionDataSource):
    """urllib-based adapter for the agent execution API."""

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the adapter.

        Args:
            base_url: API root, without trailing slash
            timeout: Socket timeout in seconds for each request
            headers: Extra request headers (e.g. authorization)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        if headers:
            self.headers.update(headers)

    def page_url(self, group_id: str, page: int) -> str:
        """Build the URL for one page of a group."""
        quoted = urllib.parse.quote(group_id, safe="")
        query = urllib.parse.urlencode({"page": page})
        return f"{self.base_url}/agent-executions/{quoted}?{query}"

    def fetch_execution_page(self, group_id: str, page: int) -> FetchedPage:
        """Fetch and validate one page. See ExecutionDataSource."""
        url = self.page_url(group_id, page)
        req = urllib.request.Request(url, headers=self.headers, method="GET")

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            raise DataFetchError(
                f"HTTP {e.code} fetching page {page}: {e.reason}",
                group_id=group_id, page_index=page,
            ) from e
        except urllib.error.URLError as e:
            raise DataFetchError(
                f"Cannot reach data source ({e.reason})",
                group_id=group_id, page_index=page,
            ) from e
        except OSError as e:
            # Timeouts and connection resets surface as OSError subclasses
            raise DataFetchError(
                f"Network error fetching page {page}: {e}",
                group_id=group_id, page_index=page,
            ) from e

        # UnicodeDecodeError is a ValueError too
        try:
            data = json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise DataFetchError(
                f"Invalid JSON in page {page}: {e}",
                group_id=group_id, page_index=page,
            ) from e

        try:
            result = FetchedPage.from_envelope(data)
        except ValueError as e:
            raise DataFetchError(
                f"Unexpected page shape for page {page}: {e}",
                group_id=group_id, page_index=page,
            ) from e

        logger.debug(
            "Fetched %s page %d: %d nodes, %d links",
            group_id, page, len(result.nodes), len(result.links),
        )
        return result
