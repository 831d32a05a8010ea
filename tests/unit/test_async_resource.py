"""Tests for the async resource lifecycle."""

import asyncio

import pytest

from vacation_planner.state.async_resource import (
    CANCELLED_MESSAGE,
    AsyncResource,
    Failed,
    Idle,
    Loading,
    Ready,
    ResourceStatus,
)
from vacation_planner.utils.error_handling import (
    NetworkError,
    ResourceStateError,
    ServiceFailure,
)


def test_new_resource_is_idle():
    resource = AsyncResource("trip")
    assert resource.state == Idle()
    assert resource.status is ResourceStatus.IDLE
    assert resource.value is None
    assert resource.error is None
    assert resource.request_id == 0


def test_start_issues_increasing_ids():
    resource = AsyncResource()
    first = resource.start()
    second = resource.start()
    assert second > first
    assert resource.state == Loading()


def test_resolve_current_request():
    resource = AsyncResource()
    request_id = resource.start()
    assert resource.resolve(request_id, "value") is True
    assert resource.state == Ready("value")
    assert resource.value == "value"
    assert resource.is_ready


def test_reject_current_request():
    resource = AsyncResource()
    request_id = resource.start()
    error = ServiceFailure("boom")
    assert resource.reject(request_id, "boom", error) is True
    assert resource.is_failed
    assert resource.error == "boom"
    assert resource.state.error is error
    assert resource.state == Failed("boom")


def test_stale_resolve_is_ignored():
    resource = AsyncResource()
    old = resource.start()
    current = resource.start()
    assert resource.resolve(old, "old value") is False
    assert resource.is_loading
    assert resource.resolve(current, "new value") is True
    assert resource.value == "new value"


def test_stale_reject_after_newer_success_is_ignored():
    resource = AsyncResource()
    old = resource.start()
    current = resource.start()
    resource.resolve(current, "trip B")
    assert resource.reject(old, "late failure") is False
    assert resource.value == "trip B"


def test_settling_twice_raises():
    resource = AsyncResource()
    request_id = resource.start()
    resource.resolve(request_id, 1)
    with pytest.raises(ResourceStateError):
        resource.resolve(request_id, 2)
    with pytest.raises(ResourceStateError):
        resource.reject(request_id, "late")


def test_settling_without_start_raises():
    resource = AsyncResource()
    with pytest.raises(ResourceStateError):
        resource.resolve(0, "value")


def test_start_from_any_state():
    resource = AsyncResource()
    resource.resolve(resource.start(), "value")
    resource.start()
    assert resource.is_loading
    assert resource.value is None

    resource.reject(resource.request_id, "failed")
    resource.start()
    assert resource.is_loading
    assert resource.error is None


def test_discard_returns_to_idle_and_ignores_outcome():
    resource = AsyncResource()
    request_id = resource.start()
    resource.discard()
    assert resource.is_idle
    assert resource.resolve(request_id, "late") is False
    assert resource.is_idle


async def test_load_success():
    async def fetch():
        return {"id": "trip-1"}

    resource = AsyncResource()
    result = await resource.load(fetch())
    assert result is resource
    assert resource.value == {"id": "trip-1"}


async def test_load_domain_error_becomes_failed():
    async def fetch():
        raise NetworkError("Could not reach the trip service")

    resource = AsyncResource()
    await resource.load(fetch())
    assert resource.is_failed
    assert resource.error == "Could not reach the trip service"
    assert isinstance(resource.state.error, NetworkError)


async def test_load_programming_error_propagates():
    async def fetch():
        raise KeyError("bug")

    resource = AsyncResource()
    with pytest.raises(KeyError):
        await resource.load(fetch())
    assert resource.is_loading


async def test_load_cancelled_marks_failed_and_reraises():
    started = asyncio.Event()

    async def fetch():
        started.set()
        await asyncio.Event().wait()

    resource = AsyncResource()
    task = asyncio.create_task(resource.load(fetch()))
    await started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert resource.error == CANCELLED_MESSAGE


async def test_slow_earlier_response_does_not_overwrite_later_one():
    release_a = asyncio.Event()

    async def fetch_a():
        await release_a.wait()
        return "trip A"

    async def fetch_b():
        return "trip B"

    resource = AsyncResource("trip")
    task_a = asyncio.create_task(resource.load(fetch_a()))
    await asyncio.sleep(0)
    await resource.load(fetch_b())
    assert resource.value == "trip B"

    release_a.set()
    await task_a
    assert resource.value == "trip B"


async def test_discarded_load_stays_idle():
    release = asyncio.Event()

    async def fetch():
        await release.wait()
        return "late"

    resource = AsyncResource()
    task = asyncio.create_task(resource.load(fetch()))
    await asyncio.sleep(0)
    assert resource.is_loading
    resource.discard()
    release.set()
    await task
    assert resource.is_idle


def test_caller_can_tell_its_own_request_settled():
    resource = AsyncResource()
    expected = resource.next_request_id
    assert resource.start() == expected
    assert resource.is_current(expected)

    newer = resource.start()
    assert not resource.is_current(expected)
    resource.discard()
    assert not resource.is_current(newer)
