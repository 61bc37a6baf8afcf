"""Blocking HTTP fetch with bounded redirect following."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import httpx
from loguru import logger

from .config import ClientSettings
from .errors import RedirectLoopError, RequestTimeoutError, TransportError

# Statuses whose body is handed to the envelope decoder as-is. 500 is included
# on purpose: the API reports some failures through the envelope on a 500.
PASS_THROUGH_STATUSES = frozenset({httpx.codes.NOT_FOUND, httpx.codes.INTERNAL_SERVER_ERROR})

SENSITIVE_PARAMS = frozenset({"user_key"})


def mask_sensitive_query_params(uri: str | httpx.URL) -> str:
    """Return ``uri`` with credential query parameters replaced by ``[REDACTED]``.

    >>> mask_sensitive_query_params("https://api.crunchbase.com/v3.1/people?user_key=abc")
    'https://api.crunchbase.com/v3.1/people?user_key=%5BREDACTED%5D'
    """
    url = httpx.URL(str(uri))
    params = url.params
    for name in SENSITIVE_PARAMS & set(params.keys()):
        params = params.set(name, "[REDACTED]")
    return str(url.copy_with(params=params)) if url.query else str(url)


def _is_pass_through(status_code: int) -> bool:
    return httpx.codes.is_success(status_code) or status_code in PASS_THROUGH_STATUSES


class Transport:
    """Issue GET requests, following redirects within a hop budget and a deadline.

    Redirect following is switched off on every request, whatever the wrapped
    ``httpx.Client`` is configured with; each hop is counted and logged here.
    """

    def __init__(
        self,
        settings: ClientSettings,
        client: httpx.Client | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._owns_client = client is None
        self._client = client or httpx.Client(follow_redirects=False)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(self, uri: str, redirect_budget: int | None = None) -> bytes:
        """Return the raw body served at ``uri``.

        Each request spends one unit of ``redirect_budget``; when the budget is
        spent and the chain has not terminated, :class:`RedirectLoopError` is
        raised without sending another request.
        """
        budget = self._settings.redirect_limit if redirect_budget is None else redirect_budget
        if budget < 0:
            raise ValueError("redirect_budget must be non-negative")

        timeout = self._settings.timeout_limit
        deadline = self._clock() + timeout
        current = uri
        hops = 0

        while True:
            if budget == 0:
                logger.error(f"Redirect budget exhausted after {hops} hop(s)")
                raise RedirectLoopError(mask_sensitive_query_params(current), hops)

            remaining = deadline - self._clock()
            if remaining <= 0:
                raise RequestTimeoutError(timeout, mask_sensitive_query_params(current))

            if self._settings.debug:
                logger.debug(f"GET {mask_sensitive_query_params(current)}")

            hops += 1
            budget -= 1
            with self._stream(current, remaining, timeout) as response:
                status = response.status_code

                if _is_pass_through(status):
                    body = self._read_body(response, deadline, timeout, current)
                    if self._settings.debug:
                        logger.debug(f"HTTP {status} ({len(body)} bytes)")
                    return body

                if 300 <= status < 400:
                    location = response.headers.get("location")
                    if not location:
                        raise TransportError(
                            status,
                            "redirect without Location header",
                            mask_sensitive_query_params(current),
                        )
                    current = str(response.url.join(location))
                    continue

                logger.warning(f"HTTP {status} from {mask_sensitive_query_params(current)}")
                raise TransportError(
                    status, response.reason_phrase, mask_sensitive_query_params(current)
                )

    @contextmanager
    def _stream(self, uri: str, remaining: float, timeout: float) -> Iterator[httpx.Response]:
        try:
            with self._client.stream(
                "GET", uri, timeout=httpx.Timeout(remaining), follow_redirects=False
            ) as response:
                yield response
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(timeout, mask_sensitive_query_params(uri)) from exc
        except httpx.RequestError as exc:
            logger.error(f"Request to {mask_sensitive_query_params(uri)} failed: {exc}")
            raise TransportError(None, str(exc), mask_sensitive_query_params(uri)) from exc

    def _read_body(
        self, response: httpx.Response, deadline: float, timeout: float, uri: str
    ) -> bytes:
        """Read the body chunk by chunk, failing as soon as the deadline passes.

        httpx applies its timeout to each read separately, so a body trickling
        in below that limit is only bounded by these checks.
        """
        chunks: list[bytes] = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            self._check_deadline(deadline, timeout, uri)
        self._check_deadline(deadline, timeout, uri)
        return b"".join(chunks)

    def _check_deadline(self, deadline: float, timeout: float, uri: str) -> None:
        if self._clock() >= deadline:
            masked = mask_sensitive_query_params(uri)
            logger.warning(f"Deadline of {timeout}s passed while reading {masked}")
            raise RequestTimeoutError(timeout, masked)
