"""
Data source port interface.

Defines the contract for fetching pages of agent execution graph data.
"""

from abc import ABC, abstractmethod

from ..domain.models import FetchedPage


class ExecutionDataSource(ABC):
    """
    Abstract interface for a paginated agent execution data source.

    Implementations must raise DataFetchError for every failure (network,
    HTTP status, decoding, envelope shape). An empty page is only ever a
    valid, successful response.
    """

    @abstractmethod
    def fetch_execution_page(self, group_id: str, page: int) -> FetchedPage:
        """
        Fetch one page of graph data for an agent group.

        Args:
            group_id: Agent group identifier
            page: 1-based page number

        Returns:
            The page's nodes, links and pagination info

        Raises:
            DataFetchError: If the page could not be fetched or decoded
        """
        pass
