"""
Application configuration.

Defaults live on the dataclasses; environment variables override them and
command-line flags (see __main__) override the environment.

Environment:
    AGENTGRAPH_API_URL   API root, e.g. http://localhost:5000/api
    AGENTGRAPH_GROUP_ID  Agent group to display
    AGENTGRAPH_TIMEOUT   HTTP timeout in seconds
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from agentgraph_core.adapters import HttpExecutionSource, build_demo_source
from agentgraph_core.ports import ExecutionDataSource
from agentgraph_core.services.interaction import InteractionSettings
from agentgraph_core.services.layout import LayoutSettings
from agentgraph_core.services.pagination import PaginationSettings
from agentgraph_core.services.viewport import ViewportSettings

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_GROUP_ID = "3D62EDA5-A2DD-4A23-98FF-AB1B758FDD9C"


@dataclass
class AppConfig:
    """Everything the app needs to start."""
    api_url: str = DEFAULT_API_URL
    group_id: str = DEFAULT_GROUP_ID
    timeout: float = 30.0

    # Layout cadence
    hot_tick_ms: int = 16      # While the layout is moving
    idle_tick_ms: int = 250    # Once converged

    # Demo mode serves generated pages instead of calling the API
    demo: bool = False
    demo_pages: int = 3

    layout: LayoutSettings = field(default_factory=LayoutSettings)
    viewport: ViewportSettings = field(default_factory=ViewportSettings)
    interaction: InteractionSettings = field(default_factory=InteractionSettings)
    pagination: PaginationSettings = field(default_factory=PaginationSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build a config from environment variables."""
        env = os.environ if environ is None else environ
        config = cls()

        if env.get("AGENTGRAPH_API_URL"):
            config.api_url = env["AGENTGRAPH_API_URL"]
        if env.get("AGENTGRAPH_GROUP_ID"):
            config.group_id = env["AGENTGRAPH_GROUP_ID"]
        if env.get("AGENTGRAPH_TIMEOUT"):
            try:
                config.timeout = float(env["AGENTGRAPH_TIMEOUT"])
            except ValueError:
                logger.warning(
                    "Ignoring invalid AGENTGRAPH_TIMEOUT=%r, using %.0fs",
                    env["AGENTGRAPH_TIMEOUT"], config.timeout,
                )

        return config

    def create_data_source(self) -> ExecutionDataSource:
        """The data source this config points at."""
        if self.demo:
            return build_demo_source(
                self.group_id,
                page_count=self.demo_pages,
                page_size=self.pagination.page_size,
            )
        return HttpExecutionSource(self.api_url, timeout=self.timeout)
