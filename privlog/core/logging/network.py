"""Network request monitoring through httpx event hooks.

Requests and responses are logged on the Network label with the URL
tagged private, so it is only shown in clear in an unredacted session.
"""
import time
from typing import Any

import httpx

from privlog.core.config import get_settings
from privlog.core.context import Capabilities, get_capabilities

from .labels import NETWORK
from .logger import PrivacyLogger
from .message import private

_STARTED_KEY = "privlog_started_at"


class NetworkMonitor:
    """Logs httpx requests and responses through a PrivacyLogger."""

    def __init__(self, logger: PrivacyLogger | None = None) -> None:
        self.logger = logger or PrivacyLogger(NETWORK, subsystem=get_settings().SUBSYSTEM)

    def on_request(self, request: httpx.Request) -> None:
        request.extensions[_STARTED_KEY] = time.perf_counter()
        self.logger.info(
            ["→ ", request.method, " ", private(request.url)],
            metadata={"method": request.method, "host": request.url.host},
        )

    def on_response(self, response: httpx.Response) -> None:
        request = response.request
        started = request.extensions.get(_STARTED_KEY)
        elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0

        tokens = [
            f"← {response.status_code} ",
            request.method,
            " ",
            private(request.url),
            f" ({elapsed_ms:.1f} ms)",
        ]
        metadata = {
            "method": request.method,
            "host": request.url.host,
            "status_code": response.status_code,
            "duration_ms": round(elapsed_ms, 1),
        }
        if response.status_code >= 400:
            self.logger.error(tokens, metadata=metadata)
        else:
            self.logger.info(tokens, metadata=metadata)

    async def on_request_async(self, request: httpx.Request) -> None:
        self.on_request(request)

    async def on_response_async(self, response: httpx.Response) -> None:
        self.on_response(response)

    @property
    def event_hooks(self) -> dict[str, list]:
        return {"request": [self.on_request], "response": [self.on_response]}

    @property
    def async_event_hooks(self) -> dict[str, list]:
        return {"request": [self.on_request_async], "response": [self.on_response_async]}


def _merge_hooks(existing: dict[str, list] | None, extra: dict[str, list]) -> dict[str, list]:
    merged = {key: list(value) for key, value in (existing or {}).items()}
    for key, hooks in extra.items():
        merged.setdefault(key, []).extend(hooks)
    return merged


def start_monitoring_network_requests(
    logger: PrivacyLogger | None = None,
    capabilities: Capabilities | None = None,
    asynchronous: bool = False,
    **client_kwargs: Any,
) -> httpx.Client | httpx.AsyncClient:
    """
    Create an httpx client, monitored when an unredacted session is active.

    Args:
        logger: Logger for request/response lines. Defaults to the Network label
        capabilities: Capabilities to decide with. Defaults to the current ones
        asynchronous: Return an AsyncClient instead of a Client
        **client_kwargs: Passed to the httpx client

    Returns:
        The httpx client
    """
    capabilities = capabilities or get_capabilities()
    client_cls = httpx.AsyncClient if asynchronous else httpx.Client

    if not (capabilities.unredacted_session_active and get_settings().NETWORK_MONITORING):
        return client_cls(**client_kwargs)

    monitor = NetworkMonitor(logger)
    hooks = monitor.async_event_hooks if asynchronous else monitor.event_hooks
    client_kwargs["event_hooks"] = _merge_hooks(client_kwargs.get("event_hooks"), hooks)
    return client_cls(**client_kwargs)
