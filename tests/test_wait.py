"""
Unit tests for wait policies and the readiness polling state machine.
"""
import asyncio
from datetime import timedelta

import pytest

from pinecone_sdk import models
from pinecone_sdk.exceptions import (
    PineconeCancelledError,
    PineconeIndexInitializationError,
    PineconeSerializationError,
    PineconeStatusError,
    PineconeTransportError,
    PineconeWaitTimeoutError,
    StatusKind,
)
from pinecone_sdk.wait import Indefinite, NoWait, PollState, ReadinessPoller, WaitFor, is_transient


def make_description(ready: bool, state: str = None) -> models.IndexDescription:
    return models.IndexDescription(
        name="idx",
        dimension=3,
        host="idx-abc.svc.pinecone.io",
        spec=models.ServerlessSpec(region="us-east-1"),
        status=models.IndexStatus(ready=ready, state=state or ("Ready" if ready else "Initializing")),
    )


class ScriptedDescribe:
    """Returns (or raises) the scripted results in order, repeating the last one."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self.call_times = []
        self.clock = None

    async def __call__(self):
        if self.clock is not None:
            self.call_times.append(self.clock.now)
        result = self.results[min(self.calls, len(self.results) - 1)]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result


def make_poller(describe, policy, clock, **kwargs):
    describe.clock = clock
    return ReadinessPoller("idx", describe, policy, clock=clock, **kwargs)


@pytest.mark.asyncio
async def test_ready_on_third_poll(clock):
    describe = ScriptedDescribe(make_description(False), make_description(False), make_description(True))
    poller = make_poller(describe, WaitFor(timeout=timedelta(seconds=60)), clock)

    result = await poller.run()

    assert result.status.ready is True
    assert poller.state == PollState.READY
    assert describe.calls == 3
    assert describe.call_times == [0.0, 5.0, 10.0]
    assert clock.now == 10.0

@pytest.mark.asyncio
async def test_ready_on_first_poll_does_not_sleep(clock):
    describe = ScriptedDescribe(make_description(True))
    poller = make_poller(describe, WaitFor(timeout=timedelta(seconds=60)), clock)

    await poller.run()

    assert describe.calls == 1
    assert clock.sleeps == []

@pytest.mark.asyncio
async def test_timeout_stops_polling(clock):
    describe = ScriptedDescribe(make_description(False))
    poller = make_poller(describe, WaitFor(timeout=timedelta(seconds=12)), clock)

    with pytest.raises(PineconeWaitTimeoutError) as exc_info:
        await poller.run()

    assert poller.state == PollState.TIMED_OUT
    assert exc_info.value.index_name == "idx"
    assert exc_info.value.elapsed == 12.0
    # Last sleep is shortened so the final poll lands on the deadline.
    assert clock.sleeps == [5.0, 5.0, 2.0]
    assert describe.call_times == [0.0, 5.0, 10.0, 12.0]

@pytest.mark.asyncio
async def test_zero_timeout_polls_once(clock):
    describe = ScriptedDescribe(make_description(False))
    poller = make_poller(describe, WaitFor(timeout=timedelta(0)), clock)

    with pytest.raises(PineconeWaitTimeoutError):
        await poller.run()
    assert describe.calls == 1

@pytest.mark.asyncio
async def test_indefinite_has_no_deadline(clock):
    describe = ScriptedDescribe(*([make_description(False)] * 99 + [make_description(True)]))
    poller = make_poller(describe, Indefinite(), clock)

    await poller.run()

    assert poller.state == PollState.READY
    assert describe.calls == 100
    assert clock.now == 495.0

@pytest.mark.asyncio
async def test_transient_failures_are_retried(clock):
    describe = ScriptedDescribe(
        PineconeTransportError("connection reset"),
        PineconeStatusError("Failed to describe index", kind=StatusKind.UNAVAILABLE, status_code=503),
        make_description(True),
    )
    poller = make_poller(describe, WaitFor(timeout=timedelta(seconds=60)), clock)

    result = await poller.run()

    assert result.status.ready is True
    assert describe.calls == 3

@pytest.mark.asyncio
async def test_repeated_transient_failures_escalate(clock):
    error = PineconeStatusError("Failed to describe index", kind=StatusKind.INTERNAL, status_code=500)
    describe = ScriptedDescribe(error)
    poller = make_poller(describe, Indefinite(), clock, max_transient_failures=3)

    with pytest.raises(PineconeStatusError) as exc_info:
        await poller.run()

    assert exc_info.value is error
    assert poller.state == PollState.FAILED
    assert describe.calls == 4

@pytest.mark.asyncio
async def test_transient_failure_count_resets_after_success(clock):
    transient = PineconeTransportError("timeout")
    describe = ScriptedDescribe(
        transient, transient, make_description(False),
        transient, transient, make_description(True),
    )
    poller = make_poller(describe, Indefinite(), clock, max_transient_failures=2)

    await poller.run()

    assert describe.calls == 6

@pytest.mark.asyncio
async def test_non_transient_failure_is_immediate(clock):
    describe = ScriptedDescribe(
        PineconeStatusError("Failed to describe index", kind=StatusKind.NOT_FOUND, status_code=404)
    )
    poller = make_poller(describe, WaitFor(timeout=timedelta(seconds=60)), clock)

    with pytest.raises(PineconeStatusError) as exc_info:
        await poller.run()

    assert exc_info.value.kind == StatusKind.NOT_FOUND
    assert poller.state == PollState.FAILED
    assert describe.calls == 1

@pytest.mark.asyncio
async def test_undecodable_describe_response_fails(clock):
    error = PineconeSerializationError("Failed to decode index description")
    describe = ScriptedDescribe(error)
    poller = make_poller(describe, Indefinite(), clock)

    with pytest.raises(PineconeSerializationError) as exc_info:
        await poller.run()

    assert exc_info.value is error
    assert poller.state == PollState.FAILED
    assert describe.calls == 1

@pytest.mark.asyncio
async def test_initialization_failed(clock):
    describe = ScriptedDescribe(make_description(False), make_description(False, "InitializationFailed"))
    poller = make_poller(describe, Indefinite(), clock)

    with pytest.raises(PineconeIndexInitializationError):
        await poller.run()

    assert poller.state == PollState.FAILED
    assert describe.calls == 2

@pytest.mark.asyncio
async def test_cancel_before_first_poll(clock):
    cancel = asyncio.Event()
    cancel.set()
    describe = ScriptedDescribe(make_description(True))
    poller = make_poller(describe, Indefinite(), clock, cancel_event=cancel)

    with pytest.raises(PineconeCancelledError):
        await poller.run()

    assert poller.state == PollState.CANCELLED
    assert describe.calls == 0

@pytest.mark.asyncio
async def test_cancel_during_wait_stops_polling(clock):
    cancel = asyncio.Event()
    describe = ScriptedDescribe(make_description(False))

    async def describe_then_cancel():
        result = await describe()
        if describe.calls == 2:
            cancel.set()
        return result

    poller = ReadinessPoller(
        "idx", describe_then_cancel, WaitFor(timeout=timedelta(seconds=60)),
        clock=clock, cancel_event=cancel,
    )

    with pytest.raises(PineconeCancelledError) as exc_info:
        await poller.run()

    assert not isinstance(exc_info.value, PineconeWaitTimeoutError)
    assert poller.state == PollState.CANCELLED
    assert describe.calls == 2

@pytest.mark.asyncio
async def test_cancel_wins_over_deadline_reached_during_describe(clock):
    cancel = asyncio.Event()
    describe = ScriptedDescribe(make_description(False))

    async def slow_describe_then_cancel():
        result = await describe()
        cancel.set()
        clock.now = 61.0
        return result

    poller = ReadinessPoller(
        "idx", slow_describe_then_cancel, WaitFor(timeout=timedelta(seconds=60)),
        clock=clock, cancel_event=cancel,
    )

    with pytest.raises(PineconeCancelledError) as exc_info:
        await poller.run()

    assert not isinstance(exc_info.value, PineconeWaitTimeoutError)
    assert poller.state == PollState.CANCELLED
    assert describe.calls == 1

@pytest.mark.asyncio
async def test_clock_sleep_error_propagates_with_cancel_event(clock):
    async def broken_sleep(seconds):
        raise RuntimeError("timer unavailable")

    clock.sleep = broken_sleep
    describe = ScriptedDescribe(make_description(False))
    poller = make_poller(describe, Indefinite(), clock, cancel_event=asyncio.Event())

    with pytest.raises(RuntimeError, match="timer unavailable"):
        await poller.run()

    assert describe.calls == 1

@pytest.mark.asyncio
async def test_task_cancellation_propagates():
    never = asyncio.Event()

    async def hang():
        await never.wait()

    poller = ReadinessPoller("idx", hang, Indefinite())
    task = asyncio.ensure_future(poller.run())
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert poller.state == PollState.POLLING

@pytest.mark.asyncio
async def test_poller_runs_once(clock):
    describe = ScriptedDescribe(make_description(True))
    poller = make_poller(describe, Indefinite(), clock)
    await poller.run()

    with pytest.raises(RuntimeError):
        await poller.run()
    assert describe.calls == 1

def test_no_wait_is_rejected():
    with pytest.raises(ValueError):
        ReadinessPoller("idx", ScriptedDescribe(make_description(True)), NoWait())

def test_wait_for_default_timeout():
    assert WaitFor().timeout == timedelta(seconds=300)

def test_is_transient():
    assert is_transient(PineconeTransportError("x"))
    assert is_transient(PineconeStatusError("x", kind=StatusKind.INTERNAL))
    assert is_transient(PineconeStatusError("x", kind=StatusKind.UNAVAILABLE))
    assert not is_transient(PineconeStatusError("x", kind=StatusKind.UNAUTHORIZED))
    assert not is_transient(ValueError("x"))

def test_wait_for_accepts_seconds():
    assert WaitFor(timeout=60).timeout == timedelta(seconds=60)
