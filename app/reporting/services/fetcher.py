"""Ordered multi-strategy fetching with a declared fallback payload.

A logical query (e.g. "pinned units for the last 30 days") is described by
an ordered list of candidates, each a concrete endpoint and parameter shape.
Candidates are tried one at a time; the first one that yields a well-formed
payload wins. When all of them fail the query's fallback payload is returned
and the result is marked as degraded instead of raising.
"""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from app.core.config import settings
from app.core.exceptions import MalformedPayloadError
from app.reporting.services.fallbacks import fallback_payload

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FetchCandidate:
    """One transport/endpoint combination for a logical query."""

    strategy: str
    url: str
    params: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    # Treat an empty parsed payload as a failure and move on
    require_data: bool = False


@dataclass(frozen=True)
class FetchQuery:
    """A logical request: candidates in priority order plus how to read them."""

    name: str
    candidates: Sequence[FetchCandidate]
    parse: Callable[[Any], Any]
    fallback_name: str | None = None

    def fallback(self) -> Any:
        return fallback_payload(self.fallback_name or self.name)


@dataclass
class FetchAttempt:
    """Outcome of trying a single candidate."""

    strategy: str
    succeeded: bool
    payload: Any = None
    failure_reason: str | None = None


@dataclass
class FetchResult:
    """Payload of the winning candidate, or the fallback when degraded."""

    payload: Any
    strategy: str | None
    degraded: bool
    attempts: list[FetchAttempt] = field(default_factory=list)


class MultiTierFetcher:
    """Try candidates sequentially and return the first usable payload."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS
        self.transport = transport

    async def fetch(self, query: FetchQuery) -> FetchResult:
        """Execute a logical query.

        Args:
            query: Candidates in priority order, payload parser and fallback.

        Returns:
            FetchResult from the first successful candidate, or a degraded
            result carrying the query's fallback payload. Never raises for
            upstream failures; cancellation propagates untouched.
        """
        attempts: list[FetchAttempt] = []

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for candidate in query.candidates:
                attempt = await self._attempt(client, query, candidate)
                attempts.append(attempt)
                if attempt.succeeded:
                    logger.info(
                        "upstream_fetch_succeeded",
                        query=query.name,
                        strategy=candidate.strategy,
                        attempt=len(attempts),
                    )
                    return FetchResult(
                        payload=attempt.payload,
                        strategy=candidate.strategy,
                        degraded=False,
                        attempts=attempts,
                    )

        logger.warning(
            "upstream_fetch_exhausted",
            query=query.name,
            attempts=len(attempts),
            reasons={a.strategy: a.failure_reason for a in attempts},
        )
        return FetchResult(
            payload=query.fallback(),
            strategy=None,
            degraded=True,
            attempts=attempts,
        )

    async def _attempt(
        self, client: httpx.AsyncClient, query: FetchQuery, candidate: FetchCandidate
    ) -> FetchAttempt:
        try:
            # Bounds the whole exchange for this candidate
            async with asyncio.timeout(self.timeout):
                response = await client.get(
                    candidate.url, params=candidate.params, headers=candidate.headers
                )
            response.raise_for_status()
            payload = query.parse(response.json())
        except httpx.HTTPStatusError as e:
            reason = f"HTTP {e.response.status_code}"
        except (httpx.TimeoutException, TimeoutError):
            reason = "Timeout"
        except httpx.RequestError as e:
            reason = f"Connection error: {str(e)}"
        except MalformedPayloadError as e:
            reason = f"Malformed payload: {e.message}"
        except ValueError as e:
            reason = f"Invalid payload: {str(e)}"
        except Exception as e:
            logger.error(
                "upstream_fetch_unexpected_error",
                query=query.name,
                strategy=candidate.strategy,
                exc_info=True,
            )
            reason = f"Unexpected error: {str(e)}"
        else:
            if candidate.require_data and not payload:
                reason = "Empty payload"
            else:
                return FetchAttempt(strategy=candidate.strategy, succeeded=True, payload=payload)

        logger.warning(
            "upstream_fetch_attempt_failed",
            query=query.name,
            strategy=candidate.strategy,
            reason=reason,
        )
        return FetchAttempt(strategy=candidate.strategy, succeeded=False, failure_reason=reason)
