"""Per-client throttling for the anonymous wizard endpoints.

The wizard posts a beacon on every step and a single submission at the end,
all without authentication, so each client IP draws from its own refilling
allowance. State lives in process memory and is bounded by ``max_clients``.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

import structlog
from fastapi import HTTPException, Request, status

logger = structlog.get_logger(__name__)

DEFAULT_MAX_CLIENTS: int = 10_000


@dataclass
class _Allowance:
    tokens: float
    updated_at: float


class ClientThrottle:
    """Token allowance per client IP with a cap on tracked clients.

    Every client starts with ``burst`` tokens. A request spends one token and
    tokens refill at ``rate_per_minute / 60`` per second up to ``burst``.

    Clients are kept in least-recently-seen order. When a new client arrives
    and ``max_clients`` are already tracked, clients whose allowance has fully
    refilled are dropped first (forgetting them changes nothing); if that is
    not enough, the least recently seen client is dropped.

    Args:
        rate_per_minute: Sustained requests allowed per minute per client.
        burst: Allowance capacity. Defaults to ``rate_per_minute``.
        max_clients: Most clients tracked at once.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        rate_per_minute: int,
        burst: int | None = None,
        max_clients: int = DEFAULT_MAX_CLIENTS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_clients < 1:
            raise ValueError("max_clients must be at least 1")
        self._refill_per_second = rate_per_minute / 60.0
        self._capacity = float(burst if burst is not None else rate_per_minute)
        self._max_clients = max_clients
        self._clock = clock
        self._clients: OrderedDict[str, _Allowance] = OrderedDict()

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, client: object) -> bool:
        return client in self._clients

    def _refilled(self, allowance: _Allowance, now: float) -> float:
        elapsed = now - allowance.updated_at
        return min(self._capacity, allowance.tokens + elapsed * self._refill_per_second)

    def _make_room(self, now: float) -> None:
        # Oldest entries are at the front, so idle clients are found there.
        while self._clients:
            oldest = next(iter(self._clients.values()))
            if self._refilled(oldest, now) < self._capacity:
                break
            self._clients.popitem(last=False)
        while len(self._clients) >= self._max_clients:
            client, _ = self._clients.popitem(last=False)
            logger.debug("Throttle evicted active client", client=client)

    def allow(self, client: str) -> bool:
        """Spend one token for ``client`` if it has one.

        Args:
            client: Client key, normally the remote IP address.

        Returns:
            True when the request may proceed.
        """
        now = self._clock()
        allowance = self._clients.get(client)
        if allowance is None:
            if len(self._clients) >= self._max_clients:
                self._make_room(now)
            allowance = _Allowance(tokens=self._capacity, updated_at=now)
            self._clients[client] = allowance
        else:
            allowance.tokens = self._refilled(allowance, now)
            allowance.updated_at = now
            self._clients.move_to_end(client)

        if allowance.tokens < 1.0:
            return False
        allowance.tokens -= 1.0
        return True

    def reset(self) -> None:
        """Forget every tracked client."""
        self._clients.clear()


def throttle_dependency(throttle: ClientThrottle) -> Callable[[Request], None]:
    """Build a route dependency that answers 429 once a client's allowance is spent.

    Args:
        throttle: Allowance store shared by the routes it guards.
    """

    def _check_throttle(request: Request) -> None:
        client_ip = (request.client.host if request.client else "") or "unknown"
        if not throttle.allow(client_ip):
            logger.info("Client throttled", client=client_ip, path=request.url.path)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests from this client. Try again shortly.",
            )

    return _check_throttle
