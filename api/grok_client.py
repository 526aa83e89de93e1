import asyncio
import json
import time
from typing import Any, Awaitable, Callable, Optional

import openai

from models.errors import (
    ApiError,
    NetworkError,
    RequestTimeoutError,
    ServiceUnavailableError,
)
from models.search import ProviderRequest, RawProviderResponse
from orchestrator.context import ServiceStats
from utils.logger import get_logger

from .base_client import BaseSearchClient

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.x.ai/v1"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MAX_RETRIES = 3
BASE_BACKOFF_MS = 1000
MAX_BACKOFF_MS = 10000


def backoff_delay_ms(attempt: int) -> int:
    """Exponential backoff for a zero-based retry attempt, capped at 10s."""
    return min(BASE_BACKOFF_MS * 2**attempt, MAX_BACKOFF_MS)


class GrokSearchClient(BaseSearchClient):
    """
    Grok live-search client.

    Uses the OpenAI SDK with xAI's base URL since the Grok API is
    OpenAI-compatible. The SDK's own retries are disabled; this client
    applies its own per-attempt timeout and exponential backoff.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "grok-3-latest",
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        client: Any = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        **kwargs,
    ):
        """
        Initialize the Grok search client.

        Args:
            api_key: The Grok API key (from X.AI); None leaves the client unhealthy
            model_name: Default model for requests built without one
            base_url: API root, the chat completions endpoint lives below it
            timeout_ms: Per-attempt request timeout in milliseconds
            max_retries: Retries after the first attempt for transient failures
            client: Pre-built AsyncOpenAI-compatible client (tests inject fakes)
            sleep: Coroutine used for backoff waits
        """
        super().__init__(api_key, model_name=model_name, **kwargs)
        self.timeout_ms = timeout_ms
        self.max_retries = max_retries
        self._sleep = sleep

        if client is None and api_key:
            client = openai.AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout_ms / 1000,
                max_retries=0,
            )
        self.client = client

        if not self.is_healthy:
            logger.error("XAI_API_KEY environment variable is required")

    async def execute(
        self, request: ProviderRequest, stats: Optional[ServiceStats] = None
    ) -> RawProviderResponse:
        """
        Send the request, retrying 5xx/429 and network failures.

        Args:
            request: Provider request; the same body is sent on every attempt
            stats: Diagnostics context that receives the last error message

        Returns:
            RawProviderResponse with the message content and citation URLs

        Raises:
            ServiceUnavailableError: No API key configured
            ApiError: Non-retryable status, or retries exhausted on an HTTP error
            RequestTimeoutError: Last attempt timed out
            NetworkError: Last attempt failed below the HTTP layer
        """
        if not self.is_healthy:
            raise ServiceUnavailableError("API service is not healthy - missing XAI_API_KEY")

        attempt = 0
        while True:
            try:
                return await self._send(request)
            except (ApiError, NetworkError) as e:
                retryable = e.retryable if isinstance(e, ApiError) else True
                if not retryable or attempt >= self.max_retries:
                    if stats is not None:
                        stats.record_last_error(e.message)
                    logger.error(
                        "Grok request failed",
                        extra={
                            "extra_fields": {
                                "error_type": type(e).__name__,
                                "error_message": e.message,
                                "attempts": attempt + 1,
                                "retryable": retryable,
                            }
                        },
                    )
                    raise

                delay_ms = backoff_delay_ms(attempt)
                logger.warning(
                    f"Request failed, retrying in {delay_ms}ms",
                    extra={
                        "extra_fields": {
                            "status": getattr(e, "status", None),
                            "error_message": e.message,
                            "attempt": attempt + 1,
                            "max_retries": self.max_retries,
                        }
                    },
                )
                await self._sleep(delay_ms / 1000)
                attempt += 1

    async def _send(self, request: ProviderRequest) -> RawProviderResponse:
        start_time = time.time()
        try:
            completion = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=request.model,
                    messages=request.messages,
                    max_tokens=request.max_tokens,
                    temperature=request.temperature,
                    stream=request.stream,
                    extra_body={"search_parameters": request.search_parameters},
                ),
                timeout=self.timeout_ms / 1000,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError):
            raise RequestTimeoutError(f"Request timeout after {self.timeout_ms}ms") from None
        except openai.APIStatusError as e:
            raise ApiError(e.status_code, self._error_body(e)) from e
        except openai.APIConnectionError as e:
            raise NetworkError(f"Failed to make API request: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)
        response = self._to_raw_response(completion)

        logger.debug(
            "API request successful",
            extra={
                "extra_fields": {
                    "model": request.model,
                    "latency_ms": latency_ms,
                    "citations": len(response.citations),
                }
            },
        )
        return response

    @staticmethod
    def _error_body(error: "openai.APIStatusError") -> str:
        if isinstance(error.body, str):
            return error.body
        if error.body is not None:
            return json.dumps(error.body)
        return error.message

    @staticmethod
    def _to_raw_response(completion: Any) -> RawProviderResponse:
        # citations is an xAI extension, kept by the SDK model as an extra field
        payload = completion.model_dump() if hasattr(completion, "model_dump") else dict(completion)

        choices = payload.get("choices") or []
        message = (choices[0].get("message") or {}) if choices else {}
        content = message.get("content") or ""

        citations = [str(url) for url in payload.get("citations") or []]
        return RawProviderResponse(content=content, citations=citations)
