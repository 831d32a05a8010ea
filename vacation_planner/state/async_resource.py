"""
Request lifecycle tracking for values obtained through remote calls.

Every view that talks to the trip service holds its results in an
AsyncResource. A resource is always in exactly one of four states
(idle, loading, ready, failed), and only the most recently started request
is allowed to settle it: every start() issues a new request id, and a
settlement carrying an older id is ignored. Without that guard a slow
response for trip A could land after the user already asked for trip B and
be shown under B's identifier.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

from vacation_planner.utils.error_handling import (
    ResourceStateError,
    VacationPlannerError,
)
from vacation_planner.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

CANCELLED_MESSAGE = "Request cancelled"


class ResourceStatus(StrEnum):
    """Tags of the resource lifecycle."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class Idle:
    status = ResourceStatus.IDLE


@dataclass(frozen=True)
class Loading:
    status = ResourceStatus.LOADING


@dataclass(frozen=True)
class Ready(Generic[T]):
    value: T
    status = ResourceStatus.READY


@dataclass(frozen=True)
class Failed:
    message: str
    error: Exception | None = field(default=None, compare=False)
    status = ResourceStatus.FAILED


ResourceState = Idle | Loading | Ready | Failed


class AsyncResource(Generic[T]):
    """
    A value obtained via a remote call, with its request lifecycle.

    The resource belongs to the view that issued the fetch. It is never shared
    between views; another view that needs the same entity fetches it again.
    """

    def __init__(self, name: str = "resource"):
        self.name = name
        self._state: ResourceState = Idle()
        self._request_id = 0

    def __repr__(self) -> str:
        return f"AsyncResource({self.name!r}, {self._state!r})"

    @property
    def state(self) -> ResourceState:
        return self._state

    @property
    def status(self) -> ResourceStatus:
        return self._state.status

    @property
    def request_id(self) -> int:
        """Id of the request currently allowed to settle the resource."""
        return self._request_id

    @property
    def next_request_id(self) -> int:
        """
        Id the next start() will issue.

        Callers that drive the resource through a remote call take this before
        the call and check is_current() afterwards to learn whether their own
        request is the one that settled the resource.
        """
        return self._request_id + 1

    def is_current(self, request_id: int) -> bool:
        return request_id == self._request_id

    @property
    def value(self) -> T | None:
        """The loaded value, or None unless the resource is ready."""
        if isinstance(self._state, Ready):
            return self._state.value
        return None

    @property
    def error(self) -> str | None:
        """The failure message, or None unless the resource failed."""
        if isinstance(self._state, Failed):
            return self._state.message
        return None

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, Idle)

    @property
    def is_loading(self) -> bool:
        return isinstance(self._state, Loading)

    @property
    def is_ready(self) -> bool:
        return isinstance(self._state, Ready)

    @property
    def is_failed(self) -> bool:
        return isinstance(self._state, Failed)

    def start(self) -> int:
        """
        Begin a new request, discarding any previous outcome.

        Allowed from any state. Requests started earlier can no longer settle
        the resource.

        Returns:
            The id the new request must settle with
        """
        self._request_id += 1
        self._state = Loading()
        logger.debug(f"{self.name}: request {self._request_id} started")
        return self._request_id

    def resolve(self, request_id: int, value: T) -> bool:
        """
        Settle the current request with a value.

        Args:
            request_id: Id returned by the start() that issued the request
            value: The loaded value

        Returns:
            True if the value was accepted, False if the request was stale

        Raises:
            ResourceStateError: If the current request was already settled
        """
        if not self._accepts(request_id, "resolve"):
            return False
        self._state = Ready(value)
        logger.debug(f"{self.name}: request {request_id} ready")
        return True

    def reject(
        self, request_id: int, message: str, error: Exception | None = None
    ) -> bool:
        """
        Settle the current request with a failure.

        Args:
            request_id: Id returned by the start() that issued the request
            message: Human-readable failure message
            error: The exception behind the failure (optional)

        Returns:
            True if the failure was accepted, False if the request was stale

        Raises:
            ResourceStateError: If the current request was already settled
        """
        if not self._accepts(request_id, "reject"):
            return False
        self._state = Failed(message, error)
        logger.warning(f"{self.name}: request {request_id} failed: {message}")
        return True

    def discard(self) -> None:
        """Abandon any in-flight request and return to idle."""
        self._request_id += 1
        self._state = Idle()

    async def load(self, awaitable: Awaitable[T]) -> "AsyncResource[T]":
        """
        Run a remote call and record its outcome on this resource.

        Domain errors become a failed state carrying their message. Anything
        else is a programming error and propagates.

        Args:
            awaitable: The pending remote call

        Returns:
            This resource
        """
        request_id = self.start()
        try:
            value = await awaitable
        except VacationPlannerError as e:
            self.reject(request_id, e.message, e)
        except asyncio.CancelledError:
            self.reject(request_id, CANCELLED_MESSAGE)
            raise
        else:
            self.resolve(request_id, value)
        return self

    def _accepts(self, request_id: int, action: str) -> bool:
        if request_id != self._request_id:
            logger.debug(
                f"{self.name}: ignoring stale {action} of request {request_id} "
                f"(current is {self._request_id})"
            )
            return False
        if not isinstance(self._state, Loading):
            raise ResourceStateError(
                f"Cannot {action} {self.name} in state {self.status.value}"
            )
        return True

