"""HTTP helpers with rate-limit handling and retry/backoff logic for the retrieval layer."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional

import requests

from .config import (
    BACKOFF_BASE_SEC,
    MAX_ATTEMPTS,
    MAX_RATE_LIMIT_WAIT_SEC,
    MIN_RATE_LIMIT_WAIT_SEC,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from .models import FetchEvent

logger = logging.getLogger(__name__)

EventHook = Callable[[FetchEvent], None]

RATE_LIMIT_STATUSES = (403, 429)


def emit_event(hook: Optional[EventHook], event: FetchEvent) -> None:
    """Deliver an event to the caller's hook; a failing hook is logged, never raised."""
    if hook is None:
        return
    try:
        hook(event)
    except Exception:
        logger.exception("[event] hook failed for %s", event.name)


def log_http_error(resp: requests.Response, url: str) -> None:
    """Log a short, human-readable message when GitHub returns an error."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        body = {"text": str(body)[:300]}
    msg = body.get("message") or body.get("error") or body.get("text")
    logger.warning("[error] HTTP %s for %s -> %s", resp.status_code, url, msg)


def _rate_limit_header(resp: requests.Response, name: str) -> Optional[int]:
    if resp.status_code not in RATE_LIMIT_STATUSES:
        return None
    value = (resp.headers or {}).get(name)
    if value is None or not str(value).strip().isdigit():
        return None
    return int(str(value).strip())


def rate_limit_reset(resp: requests.Response) -> Optional[int]:
    """Return the X-RateLimit-Reset timestamp when the response is a rate-limit rejection."""
    return _rate_limit_header(resp, "X-RateLimit-Reset")


def retry_after(resp: requests.Response) -> Optional[int]:
    """Return the Retry-After seconds GitHub sends with secondary rate limits."""
    return _rate_limit_header(resp, "Retry-After")


def is_rate_limited(resp: requests.Response) -> bool:
    """True for a 403/429 that carries a reset timestamp or a Retry-After delay."""
    return rate_limit_reset(resp) is not None or retry_after(resp) is not None


def _bounded_wait(wait_sec: float, ceiling: float) -> float:
    return max(float(MIN_RATE_LIMIT_WAIT_SEC), min(wait_sec, float(ceiling)))


def rate_limit_wait_seconds(reset: int, now: float, ceiling: float = MAX_RATE_LIMIT_WAIT_SEC) -> float:
    """Seconds until `reset` plus one, capped at `ceiling` and never below one second."""
    return _bounded_wait(max(0.0, float(reset) - now) + 1.0, ceiling)


def rate_limit_wait(resp: requests.Response, now: float, ceiling: float = MAX_RATE_LIMIT_WAIT_SEC) -> Optional[float]:
    """Wait for a rate-limited response, preferring Retry-After over the reset timestamp."""
    delay = retry_after(resp)
    if delay is not None:
        return _bounded_wait(float(delay), ceiling)
    reset = rate_limit_reset(resp)
    if reset is not None:
        return rate_limit_wait_seconds(reset, now, ceiling)
    return None


class HttpClient:
    """GET-and-parse client for the GitHub REST and raw-content endpoints.

    Generic failures are retried with exponential backoff (`backoff_base ** attempt`
    seconds between attempts, `max_attempts` attempts in total). Rate-limit rejections
    wait until the advertised reset and retry without consuming an attempt. Every
    failure that survives the retry policy comes back as ``None``.

    One session is shared by the aggregator's worker threads. Requests carry their
    headers per call, so the session's own state is never mutated after construction.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        max_attempts: int = MAX_ATTEMPTS,
        backoff_base: float = BACKOFF_BASE_SEC,
        retries_enabled: bool = True,
        max_rate_limit_wait: float = MAX_RATE_LIMIT_WAIT_SEC,
        terminal_statuses: Iterable[int] = (),
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        on_event: Optional[EventHook] = None,
    ) -> None:
        self.token = token or None
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self.retries_enabled = retries_enabled
        self.max_rate_limit_wait = max_rate_limit_wait
        self.terminal_statuses: FrozenSet[int] = frozenset(terminal_statuses)
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.on_event = on_event
        self.headers = self.build_headers()

    def close(self) -> None:
        """Close the session if this client created it; a caller-supplied session is left open."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def build_headers(self) -> Dict[str, str]:
        """Base headers; Authorization is only present when a token was configured."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def send(self, url: str) -> requests.Response:
        """Issue a single GET; non-2xx responses are returned, not raised."""
        return self.session.get(url, headers=self.headers, timeout=self.timeout)

    def _emit(self, name: str, url: str, **detail: Any) -> None:
        emit_event(self.on_event, FetchEvent(name=name, url=url, detail=detail))

    def get_json(self, url: str, attempt: int = 1) -> Optional[Any]:
        """Fetch `url` and return its parsed JSON body, or None once the retry policy gives up."""
        while True:
            resp: Optional[requests.Response] = None
            try:
                resp = self.send(url)
            except requests.RequestException as exc:
                logger.warning("[request] %s failed: %s", url, exc)
                self._emit("request.error", url, attempt=attempt, error=str(exc))

            if resp is not None and 200 <= resp.status_code < 300:
                try:
                    return resp.json()
                except ValueError as exc:
                    logger.warning("[malformed] %s returned an unparseable body: %s", url, exc)
                    self._emit("request.malformed", url, status=resp.status_code, error=str(exc))
                    return None

            if resp is not None and self.retries_enabled:
                wait_sec = rate_limit_wait(resp, time.time(), self.max_rate_limit_wait)
                if wait_sec is not None:
                    logger.warning("[rate-limit] HTTP %s for %s; waiting %.1fs", resp.status_code, url, wait_sec)
                    self._emit(
                        "request.rate_limited",
                        url,
                        status=resp.status_code,
                        reset=rate_limit_reset(resp),
                        retry_after=retry_after(resp),
                        wait=wait_sec,
                    )
                    time.sleep(wait_sec)
                    continue

            status = resp.status_code if resp is not None else None
            retryable = status not in self.terminal_statuses
            if self.retries_enabled and retryable and attempt < self.max_attempts:
                delay = self.backoff_base ** attempt
                logger.warning(
                    "[retry %d/%d] %s -> sleep %.1fs",
                    attempt,
                    self.max_attempts,
                    f"HTTP {status}" if status is not None else "network error",
                    delay,
                )
                self._emit("request.retry", url, attempt=attempt, status=status, delay=delay)
                time.sleep(delay)
                attempt += 1
                continue

            if resp is not None:
                log_http_error(resp, url)
            self._emit("request.failed", url, attempt=attempt, status=status)
            return None


__all__ = [
    "EventHook",
    "HttpClient",
    "RATE_LIMIT_STATUSES",
    "emit_event",
    "is_rate_limited",
    "log_http_error",
    "rate_limit_reset",
    "rate_limit_wait",
    "rate_limit_wait_seconds",
    "retry_after",
]
