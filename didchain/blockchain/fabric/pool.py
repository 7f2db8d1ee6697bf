"""
Gateway Pool
============

Bounded, thread-safe pool of gateway connections.

Idle gateways are reused most-recently-returned first; callers blocked on
an exhausted pool are served in arrival order.

Version: 0.1.0
"""

import threading
import time
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from didchain.blockchain.fabric.gateway import Gateway, GatewayFactory
from didchain.errors import ConfigurationError, LedgerConnectionError, PoolExhaustedError
from didchain.logging import get_logger

logger = get_logger(__name__)


class GatewayPool:
    """
    Pool of gateway connections.

    Example:
        >>> pool = GatewayPool(factory, max_total=10, min_idle=2, max_idle=5)
        >>> with pool.connection() as gateway:
        ...     gateway.get_network("mychannel")
    """

    def __init__(
        self,
        factory: GatewayFactory,
        max_total: int = 10,
        min_idle: int = 2,
        max_idle: int = 5,
        max_wait: float | None = None,
    ) -> None:
        if max_total <= 0:
            raise ConfigurationError("Pool max_total must be positive")
        if not 0 <= min_idle <= max_idle:
            raise ConfigurationError("Pool requires 0 <= min_idle <= max_idle")

        self._factory = factory
        self.max_total = max_total
        self.min_idle = min_idle
        self.max_idle = max_idle
        self.max_wait = max_wait

        self._cond = threading.Condition()
        self._idle: deque[Any] = deque()
        self._borrowed: dict[int, Any] = {}
        self._pending = 0
        self._waiters: deque[object] = deque()
        self._closed = False

    # =========================================================================
    # Observability
    # =========================================================================

    @property
    def num_active(self) -> int:
        """Gateways currently checked out (including ones being opened)."""
        with self._cond:
            return len(self._borrowed) + self._pending

    @property
    def num_idle(self) -> int:
        with self._cond:
            return len(self._idle)

    @property
    def exhausted(self) -> bool:
        """True when every permitted connection is checked out."""
        with self._cond:
            return not self._idle and self._total() >= self.max_total

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def stats(self) -> dict[str, Any]:
        """Get pool statistics."""
        with self._cond:
            return {
                "max_total": self.max_total,
                "num_active": len(self._borrowed) + self._pending,
                "num_idle": len(self._idle),
                "num_waiters": len(self._waiters),
                "closed": self._closed,
            }

    def _total(self) -> int:
        return len(self._borrowed) + self._pending + len(self._idle)

    # =========================================================================
    # Checkout / checkin
    # =========================================================================

    def borrow(self, timeout: float | None = None) -> Gateway:
        """
        Check out a gateway, blocking while the pool is exhausted.

        Args:
            timeout: Seconds to wait; defaults to the pool's ``max_wait``.
                None waits indefinitely.

        Returns:
            Gateway

        Raises:
            PoolExhaustedError: If the wait bound expires
            LedgerConnectionError: If the pool is closed or a gateway cannot be opened
        """
        wait = timeout if timeout is not None else self.max_wait
        deadline = None if wait is None else time.monotonic() + wait

        # The ticket keeps this caller's place in line across discarded gateways
        with self._cond:
            ticket = object()
            self._waiters.append(ticket)
        try:
            while True:
                gateway = self._reserve(ticket, deadline)
                if gateway is None:
                    break

                if self._factory.validate(gateway):
                    with self._cond:
                        self._pending -= 1
                        self._borrowed[id(gateway)] = gateway
                    logger.debug("gateway_borrowed", num_active=self.num_active)
                    return gateway

                logger.warning("gateway_invalid_discarded")
                self._factory.destroy(gateway)
                with self._cond:
                    self._pending -= 1
        finally:
            with self._cond:
                self._waiters.remove(ticket)
                self._cond.notify_all()

        return self._open_reserved()

    def _reserve(self, ticket: object, deadline: float | None) -> Any:
        """Wait for ``ticket`` to reach the head, then claim an idle gateway or a slot (None)."""
        with self._cond:
            while True:
                if self._closed:
                    raise LedgerConnectionError("Gateway pool is closed")

                if self._waiters[0] is ticket:
                    if self._idle:
                        self._pending += 1
                        return self._idle.pop()
                    if self._total() < self.max_total:
                        self._pending += 1
                        return None

                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    logger.warning("gateway_pool_exhausted", max_total=self.max_total)
                    raise PoolExhaustedError(
                        f"No gateway available within the wait bound "
                        f"(max_total={self.max_total})"
                    )
                self._cond.wait(remaining)

    def _open_reserved(self) -> Gateway:
        try:
            gateway = self._factory.create()
        except Exception as e:
            with self._cond:
                self._pending -= 1
                self._cond.notify_all()
            logger.error("gateway_create_failed", error=str(e))
            raise LedgerConnectionError(f"Cannot open gateway: {e}") from e

        with self._cond:
            self._pending -= 1
            self._borrowed[id(gateway)] = gateway
        logger.debug("gateway_borrowed", num_active=self.num_active, created=True)
        return gateway

    def give_back(self, gateway: Gateway) -> None:
        """Return a borrowed gateway; surplus or post-close returns are destroyed."""
        with self._cond:
            if self._borrowed.pop(id(gateway), None) is None:
                logger.warning("gateway_not_borrowed")
                return

            keep = not self._closed and len(self._idle) < self.max_idle
            if keep:
                self._idle.append(gateway)
            self._cond.notify_all()

        if not keep:
            self._factory.destroy(gateway)
        logger.debug("gateway_returned", kept=keep)

    def invalidate(self, gateway: Gateway) -> None:
        """Destroy a borrowed gateway instead of returning it."""
        with self._cond:
            if self._borrowed.pop(id(gateway), None) is None:
                return
            self._cond.notify_all()
        self._factory.destroy(gateway)

    @contextmanager
    def connection(self, timeout: float | None = None) -> Iterator[Gateway]:
        """Borrow a gateway for the duration of a block; it is always returned."""
        gateway = self.borrow(timeout)
        try:
            yield gateway
        finally:
            self.give_back(gateway)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def prepare(self) -> None:
        """Pre-create idle gateways up to ``min_idle``."""
        with self._cond:
            missing = min(self.min_idle - len(self._idle), self.max_total - self._total())
            missing = max(missing, 0)
            self._pending += missing

        for created in range(missing):
            try:
                gateway = self._factory.create()
            except Exception as e:
                with self._cond:
                    self._pending -= missing - created
                    self._cond.notify_all()
                logger.error("gateway_create_failed", error=str(e))
                raise LedgerConnectionError(f"Cannot open gateway: {e}") from e

            with self._cond:
                self._pending -= 1
                if self._closed:
                    keep = False
                else:
                    self._idle.append(gateway)
                    keep = True
                self._cond.notify_all()
            if not keep:
                self._factory.destroy(gateway)

        logger.info("gateway_pool_prepared", num_idle=self.num_idle)

    def close(self) -> None:
        """Close the pool; idle gateways are destroyed, borrowed ones on return."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            idle = list(self._idle)
            self._idle.clear()
            self._cond.notify_all()

        for gateway in idle:
            self._factory.destroy(gateway)
        logger.info("gateway_pool_closed", destroyed=len(idle))
