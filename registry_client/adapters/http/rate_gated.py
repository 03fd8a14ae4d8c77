"""Rate-gated HTTP transport for the registry API."""

from __future__ import annotations

import logging
import time

import httpx
from pydantic import ValidationError

from registry_client.adapters.http.base import AbstractTransport, ModelT, QueryParams
from registry_client.adapters.rate_limit.base import AbstractRateGate
from registry_client.core.config import DEFAULT_BASE_URL
from registry_client.core.errors import (
    ApiError,
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
)
from registry_client.schemas.envelope import ApiErrors, is_error_envelope

logger = logging.getLogger(__name__)


class RateGatedTransport(AbstractTransport):
    """Send GET requests one at a time through a rate gate.

    Uses an ``httpx.AsyncClient`` session carrying the identifying User-Agent.
    The gate is held from the spacing wait until the response has been
    classified and decoded, so requests sharing the gate never overlap.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        gate: AbstractRateGate,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport and its HTTP session.

        Args:
            user_agent: Descriptive User-Agent, e.g. "my_bot (help@my_bot.com)".
            gate: Rate gate shared by every request of this transport.
            base_url: API origin; request paths are resolved relative to it.
            timeout_seconds: Per-request timeout; None disables timeouts.
            http_transport: Optional httpx transport (mock transports in tests).

        Raises:
            ConfigurationError: If the user agent is empty.
        """
        if not user_agent or not user_agent.strip():
            raise ConfigurationError(
                code="missing_user_agent",
                message="A descriptive user agent is required by the registry crawler policy",
                details={"setting": "user_agent"},
            )

        self.gate = gate
        self.user_agent = user_agent
        self.http = httpx.AsyncClient(
            base_url=base_url,
            headers={"User-Agent": user_agent},
            timeout=timeout_seconds,
            follow_redirects=True,
            transport=http_transport,
        )

    async def get(
        self,
        path: str,
        model: type[ModelT],
        *,
        params: QueryParams | None = None,
    ) -> ModelT:
        async with self.gate.hold() as slot:
            start = time.perf_counter()
            try:
                response = await self.http.get(path, params=list(params) if params else None)
            except httpx.HTTPError as exc:
                # No response: the gate keeps its previous completion time.
                logger.warning(
                    "registry.transport_error",
                    extra={
                        "path": path,
                        "error_type": type(exc).__name__,
                        "error_msg": str(exc),
                    },
                )
                raise TransportError(
                    code="transport_failure",
                    message=f"Request to {path} failed: {exc}",
                    details={"url": path},
                ) from exc

            slot.mark_responded()
            logger.debug(
                "registry.request",
                extra={
                    "url": str(response.request.url),
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                    "waited_s": round(slot.waited_seconds, 4),
                },
            )
            return self._decode(response, model)

    def _decode(self, response: httpx.Response, model: type[ModelT]) -> ModelT:
        """Classify a response by status and unwrap its envelope.

        Raises:
            NotFoundError: On 404.
            PermissionDeniedError: On 403, with the body text as reason.
            TransportError: On other non-2xx statuses or undecodable bodies.
            ApiError: When a 2xx body is the error envelope.
        """
        url = str(response.request.url)
        status = response.status_code

        if status == 404:
            raise NotFoundError.for_url(url)
        if status == 403:
            raise PermissionDeniedError.with_reason(response.text)
        if not response.is_success:
            raise TransportError(
                code="unexpected_status",
                message=f"Registry answered {status} for {url}",
                details={"url": url, "http_status": status},
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                code="decode_error",
                message=f"Response from {url} is not valid JSON: {exc}",
                details={"url": url, "http_status": status},
            ) from exc

        if is_error_envelope(body):
            try:
                messages = ApiErrors.model_validate(body).messages()
            except ValidationError:
                messages = [str(error) for error in body["errors"]]
            raise ApiError.from_messages(messages)

        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise TransportError(
                code="decode_error",
                message=f"Response from {url} does not match {model.__name__}: {exc}",
                details={"url": url, "http_status": status},
            ) from exc

    async def aclose(self) -> None:
        await self.http.aclose()
