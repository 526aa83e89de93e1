from abc import ABC, abstractmethod
from typing import Any, Optional

from models.search import ProviderRequest, RawProviderResponse
from orchestrator.context import ServiceStats


class BaseSearchClient(ABC):
    """
    Abstract base class for live-search API clients.
    Provider-specific clients inherit from this class and implement execute().
    """

    @abstractmethod
    def __init__(self, api_key: Optional[str], **kwargs):
        """
        Initialize the search client.

        Args:
            api_key: API key for the search service (None marks the client unhealthy)
            **kwargs: Additional provider-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get("model_name")

    @property
    def is_healthy(self) -> bool:
        """A client without credentials refuses to call out."""
        return bool(self.api_key)

    @abstractmethod
    async def execute(
        self, request: ProviderRequest, stats: Optional[ServiceStats] = None
    ) -> RawProviderResponse:
        """
        Send a search request to the provider.

        Args:
            request: Fully built provider request
            stats: Diagnostics context that receives the last error message

        Returns:
            The unparsed text content and its citation URLs
        """
        pass

    def check_health(self) -> dict[str, Any]:
        """
        Report client health for diagnostics.

        Returns:
            A dictionary with the health flag and credential presence
        """
        return {"healthy": self.is_healthy, "has_api_key": bool(self.api_key)}
