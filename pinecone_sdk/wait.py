"""
Wait policies and the index-readiness polling state machine.

After an index is created the caller chooses how long to block for it to
become ready. ``ReadinessPoller`` drives the wait as an explicit state
machine::

    POLLING --ready--------------------> READY
    POLLING --deadline reached---------> TIMED_OUT   (WaitFor only)
    POLLING --hard or repeated failure-> FAILED
    POLLING --cancel_event set---------> CANCELLED

Time is read through a ``Clock`` so the machine can be driven without real
delays in tests.
"""
import asyncio
import logging
from datetime import timedelta
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field  # type: ignore

from .exceptions import (
    PineconeCancelledError,
    PineconeException,
    PineconeIndexInitializationError,
    PineconeStatusError,
    PineconeTransportError,
    PineconeWaitTimeoutError,
    StatusKind,
)
from .models import IndexDescription, IndexState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_MAX_TRANSIENT_FAILURES = 3

_TRANSIENT_KINDS = frozenset({StatusKind.INTERNAL, StatusKind.UNAVAILABLE})

# --- Policies ---

class NoWait(BaseModel):
    """Return the creation response immediately, ready or not."""
    model_config = ConfigDict(frozen=True)

class WaitFor(BaseModel):
    """Poll until ready, giving up once ``timeout`` has elapsed."""
    model_config = ConfigDict(frozen=True)

    timeout: timedelta = Field(default=timedelta(seconds=300))

class Indefinite(BaseModel):
    """Poll until ready or failed, with no deadline."""
    model_config = ConfigDict(frozen=True)

WaitPolicy = Union[NoWait, WaitFor, Indefinite]

DEFAULT_WAIT_POLICY = WaitFor(timeout=timedelta(seconds=300))

# --- Clock ---

class Clock(Protocol):
    def monotonic(self) -> float:
        ...

    async def sleep(self, seconds: float) -> None:
        ...

class LoopClock:
    """Clock backed by the running event loop."""

    def monotonic(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

# --- State machine ---

class PollState(str, Enum):
    POLLING = "POLLING"
    READY = "READY"
    TIMED_OUT = "TIMED_OUT"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

def is_transient(error: Exception) -> bool:
    if isinstance(error, PineconeTransportError):
        return True
    return isinstance(error, PineconeStatusError) and error.kind in _TRANSIENT_KINDS

class ReadinessPoller:
    """
    Polls ``describe`` until the index is ready, the policy's deadline is
    reached, a failure escalates, or ``cancel_event`` is set.

    The first describe call is issued immediately; subsequent calls follow
    every ``poll_interval`` seconds, the last sleep being shortened so that
    the final poll lands on the deadline. Up to ``max_transient_failures``
    consecutive transient describe failures are tolerated.

    ``run`` returns the ready description or raises:

    * ``PineconeWaitTimeoutError`` on TIMED_OUT,
    * ``PineconeCancelledError`` on CANCELLED,
    * the describe error or ``PineconeIndexInitializationError`` on FAILED.
    """

    def __init__(
        self,
        index_name: str,
        describe: Callable[[], Awaitable[IndexDescription]],
        policy: Union[WaitFor, Indefinite],
        clock: Optional[Clock] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_transient_failures: int = DEFAULT_MAX_TRANSIENT_FAILURES,
        cancel_event: Optional[asyncio.Event] = None,
    ):
        if isinstance(policy, NoWait):
            raise ValueError("NoWait does not poll")
        self.index_name = index_name
        self._describe = describe
        self.policy = policy
        self.clock = clock or LoopClock()
        self.poll_interval = poll_interval
        self.max_transient_failures = max_transient_failures
        self.cancel_event = cancel_event

        self.state = PollState.POLLING
        self.describe_calls = 0
        self.last_description: Optional[IndexDescription] = None

    @property
    def deadline(self) -> Optional[float]:
        if isinstance(self.policy, WaitFor):
            return self.policy.timeout.total_seconds()
        return None

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _cancel(self) -> PineconeCancelledError:
        self.state = PollState.CANCELLED
        logger.info("Wait for index %r cancelled after %d polls", self.index_name, self.describe_calls)
        return PineconeCancelledError(self.index_name)

    async def _sleep(self, seconds: float) -> None:
        if self.cancel_event is None:
            await self.clock.sleep(seconds)
            return
        sleeper = asyncio.ensure_future(self.clock.sleep(seconds))
        waiter = asyncio.ensure_future(self.cancel_event.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if sleeper.done() and not sleeper.cancelled():
                sleeper.result()
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()

    async def run(self) -> IndexDescription:
        if self.state is not PollState.POLLING:
            raise RuntimeError(f"Poller already finished in state {self.state.value}")

        start = self.clock.monotonic()
        deadline = self.deadline
        failures = 0

        while True:
            if self._cancelled():
                raise self._cancel()

            self.describe_calls += 1
            try:
                description = await self._describe()
            except PineconeException as e:
                failures += 1
                if not is_transient(e) or failures > self.max_transient_failures:
                    self.state = PollState.FAILED
                    logger.debug("Describe for index %r failed, giving up: %s", self.index_name, e)
                    raise
                logger.warning(
                    "Transient failure describing index %r (%d/%d): %s",
                    self.index_name, failures, self.max_transient_failures, e,
                )
            else:
                failures = 0
                self.last_description = description
                if description.status.ready:
                    self.state = PollState.READY
                    logger.info("Index %r ready after %d polls", self.index_name, self.describe_calls)
                    return description
                if description.status.state is IndexState.INITIALIZATION_FAILED:
                    self.state = PollState.FAILED
                    raise PineconeIndexInitializationError(self.index_name)
                logger.debug("Index %r not ready (state=%s)", self.index_name, description.status.state.value)

            if self._cancelled():
                raise self._cancel()

            elapsed = self.clock.monotonic() - start
            if deadline is not None and elapsed >= deadline:
                self.state = PollState.TIMED_OUT
                raise PineconeWaitTimeoutError(self.index_name, elapsed)

            delay = self.poll_interval
            if deadline is not None:
                delay = min(delay, deadline - elapsed)
            await self._sleep(delay)
