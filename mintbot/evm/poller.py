# -*- coding: utf-8 -*-

import asyncio
import enum
import math
import logging

from ..errors import BudgetExhausted


logger = logging.getLogger(__name__)


class PollerState(enum.Enum):
    IDLE = "idle"
    POLLING = "polling"
    READY = "ready"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class ReadinessPoller(object):
    """Evaluate an async readiness predicate at a fixed interval.

    ``wait_ready()`` checks immediately, then every ``interval`` seconds,
    until the predicate returns True or ``cancel()`` is called. A predicate
    that raises counts as "not ready" and is only logged. ``cancel()`` may
    be called from inside the predicate: the pending sleep is woken and no
    further check runs.

    ``timeout`` bounds the total polling time measured from the first
    ``wait_ready()`` call; once spent, ``wait_ready()`` raises
    BudgetExhausted.
    """

    def __init__(self, predicate, interval, timeout=None, name="readiness"):
        assert interval > 0, f"Poll Interval Error => [{interval}]"
        self.predicate = predicate
        self.interval = interval
        self.timeout = timeout if timeout and math.isfinite(timeout) else None
        self.name = name
        self.state = PollerState.IDLE
        self.checks = 0
        self._cancelled = asyncio.Event()
        self._started_at = None
        self._deadline_reached = False


    @property
    def cancelled(self):
        return self.state is PollerState.CANCELLED


    def cancel(self):
        if self.state in (PollerState.CANCELLED, PollerState.EXPIRED):
            return
        self.state = PollerState.CANCELLED
        self._cancelled.set()


    async def _check(self):
        self.checks += 1
        try:
            return bool(await self.predicate())
        except Exception as e:
            logger.warning(f"[{self.name}] Check[{self.checks}] Error, Treated As Not Ready[{e}]")
            return False


    def _remaining(self, loop):
        if self.timeout is None:
            return None
        return self._started_at + self.timeout - loop.time()


    async def _sleep(self, delay, loop):
        """Sleep ``delay`` seconds; return False when woken by cancel().

        A sleep that would overrun the time budget is cut short so the
        last check lands on the budget's end; the sleep after it expires.
        """
        remaining = self._remaining(loop)
        if remaining is not None:
            if remaining <= 0 or self._deadline_reached:
                self.state = PollerState.EXPIRED
                raise BudgetExhausted(
                    f"[{self.name}] Not Ready Within {self.timeout}s After {self.checks} Checks")
            if remaining <= delay:
                delay = remaining
                self._deadline_reached = True
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return True
        return False


    async def wait_ready(self, delay=0) -> bool:
        if self.state in (PollerState.CANCELLED, PollerState.EXPIRED):
            return False
        loop = asyncio.get_running_loop()
        if self._started_at is None:
            self._started_at = loop.time()
        self.state = PollerState.POLLING

        if delay > 0 and not await self._sleep(delay, loop):
            return False
        while True:
            ready = await self._check()
            if self.cancelled:
                return False
            if ready:
                self.state = PollerState.READY
                logger.info(f"[{self.name}] Ready After {self.checks} Checks")
                return True
            logger.info(f"[{self.name}] Not Ready Yet, Next Check In {self.interval}s")
            if not await self._sleep(self.interval, loop):
                return False
