# authgate/adapters/outbound/security/token_blacklist.py

"""
In-memory token blacklist.

Revoked token ids are kept in a process-local dictionary until their own
expiry. The set does not span server instances; deployments with several
workers plug a shared store in through ``ITokenBlacklist`` instead.
"""

import asyncio
import logging
import threading
import time
from typing import Callable, Dict, Optional

from authgate.application.ports.outbound import ITokenBlacklist

logger = logging.getLogger(__name__)


class InMemoryTokenBlacklist(ITokenBlacklist):
    """
    Thread-safe map of ``jti -> expires_at_millis``.

    The lock is only held for single dictionary operations, or for one
    bounded batch while sweeping, so request-path lookups never wait on a
    full scan.
    """

    def __init__(
            self,
            sweep_interval_seconds: float = 3600,
            sweep_batch_size: int = 500,
            clock: Callable[[], float] = time.time,
    ):
        self._entries: Dict[str, int] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.sweep_interval_seconds = sweep_interval_seconds
        self.sweep_batch_size = sweep_batch_size
        self._sweeper_task: Optional[asyncio.Task] = None

    async def add(self, jti: str, expires_at_millis: int) -> None:
        with self._lock:
            self._entries[jti] = int(expires_at_millis)
        logger.debug(f"Token {jti} blacklisted until {expires_at_millis}")

    async def contains(self, jti: Optional[str]) -> bool:
        if not jti:
            return False
        with self._lock:
            return jti in self._entries

    async def remove(self, jti: str) -> None:
        with self._lock:
            self._entries.pop(jti, None)

    async def sweep(self) -> int:
        """Remove every entry whose expiry is in the past. Returns the count removed."""
        now_millis = int(self._clock() * 1000)
        with self._lock:
            snapshot = list(self._entries.items())

        expired = [(jti, expires_at) for jti, expires_at in snapshot if expires_at < now_millis]
        removed = 0
        for start in range(0, len(expired), self.sweep_batch_size):
            batch = expired[start:start + self.sweep_batch_size]
            with self._lock:
                for jti, expires_at in batch:
                    # Re-added with a new expiry since the snapshot: keep it
                    if self._entries.get(jti) == expires_at:
                        del self._entries[jti]
                        removed += 1
            await asyncio.sleep(0)
        return removed

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # ── Lifecycle ────────────────────────────────────────────────────────────

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper_task is not None and not self._sweeper_task.done()

    async def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self.is_sweeping:
            return
        self._sweeper_task = asyncio.create_task(self._periodic_sweep())
        logger.info(f"Token blacklist sweeper started (every {self.sweep_interval_seconds}s)")

    async def stop(self) -> None:
        if self._sweeper_task is None:
            return
        self._sweeper_task.cancel()
        try:
            await self._sweeper_task
        except asyncio.CancelledError:
            pass
        self._sweeper_task = None
        logger.info("Token blacklist sweeper stopped")

    async def _periodic_sweep(self) -> None:
        """Background task to periodically clean up expired tokens."""
        while True:
            try:
                await asyncio.sleep(self.sweep_interval_seconds)
                removed = await self.sweep()
                logger.info(f"Cleaned up {removed} expired tokens from blacklist ({self.size()} remaining)")
            except asyncio.CancelledError:
                logger.info("Token cleanup task cancelled")
                break
            except Exception as e:
                logger.exception(f"Error sweeping token blacklist: {e}")
