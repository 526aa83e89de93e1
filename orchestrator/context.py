"""
ServiceStats - diagnostics counters threaded through each search call.

The orchestrator owns one instance and hands it to the API client, so the
counters stay explicit and tests can inspect them without a running server.
"""

import time
from dataclasses import dataclass, field


@dataclass
class ServiceStats:
    """
    Request/error counters and last-error diagnostics.

    Attributes:
        started_at: Monotonic start time used for uptime
        total_requests: Search invocations received
        error_count: Search invocations that surfaced an error
        last_error: Message of the most recent transport failure
    """

    started_at: float = field(default_factory=time.monotonic)
    total_requests: int = 0
    error_count: int = 0
    last_error: str | None = None

    def record_request(self) -> None:
        self.total_requests += 1

    def record_error(self) -> None:
        self.error_count += 1

    def record_last_error(self, message: str) -> None:
        self.last_error = message

    @property
    def uptime_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)

    @property
    def success_rate(self) -> str:
        if self.total_requests == 0:
            return "N/A"
        rate = (self.total_requests - self.error_count) / self.total_requests * 100
        return f"{rate:.2f}%"

