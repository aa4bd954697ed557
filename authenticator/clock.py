"""
clock.py — Server time synchronisation.

A ServerClock caches the signed difference between the platform's clock and
the local clock. One instance is meant to be shared by every authenticator in
the process; the first caller to find the cache empty asks the remote service
for its time, everybody else reuses the stored offset.
"""

import asyncio
import threading
import time as _time

from authenticator.log_handler import log

UINT32_MASK = 0xFFFFFFFF
LOCK_POLL_INTERVAL = 0.01
# Skew the platform's own clients can represent; larger values still work here.
MAX_EXPECTED_SKEW = 32767


class ServerClock:
    """
    Cached offset between local and server time.

    offset == 0 means "not synchronised yet". A real zero skew is
    indistinguishable from that and only costs one extra query.
    """

    def __init__(self, time_func=None):
        self._time_func = time_func or _time.time
        # Shared by callers on different event loops and threads.
        self._lock = threading.Lock()
        self.offset = 0

    def local_time(self) -> int:
        return int(self._time_func())

    def reset(self) -> None:
        self.offset = 0

    async def get_server_time(self, service) -> int:
        """
        Return the current server time as an unsigned 32-bit value.

        Never raises for remote failures: when the server time cannot be
        obtained, the uncorrected local time is returned and the next call
        tries again.
        """
        if self.offset:
            return (self.local_time() + self.offset) & UINT32_MASK

        while not self._lock.acquire(blocking=False):
            await asyncio.sleep(LOCK_POLL_INTERVAL)
        try:
            # Another caller may have synchronised while we were waiting.
            if not self.offset:
                await self._synchronise(service)
        finally:
            self._lock.release()

        return (self.local_time() + self.offset) & UINT32_MASK

    async def _synchronise(self, service) -> None:
        try:
            server_time = await service.fetch_server_time()
        except Exception:
            log.exception("Fetching server time failed")
            return

        if not server_time:
            log.warning("Server time unavailable, using local clock")
            return

        offset = int(server_time) - self.local_time()
        if abs(offset) > MAX_EXPECTED_SKEW:
            log.warning("Clock skew of %d seconds exceeds %d", offset, MAX_EXPECTED_SKEW)
        self.offset = offset
        log.debug("Synchronised with server time, offset=%ds", offset)
