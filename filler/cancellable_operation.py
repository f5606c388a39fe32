"""Runs an action alongside a polled cancellation condition."""

import asyncio
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Literal, Optional

from common.constants import DEFAULT_POLL_INTERVAL
from common.logging_config import get_logger
from filler.exceptions import OperationCancelledError

logger = get_logger(__name__)


@dataclass(frozen=True)
class Completed:
    """The action returned normally."""

    status: Literal["completed"] = "completed"


@dataclass(frozen=True)
class Cancelled:
    """The action stopped because cancellation was requested."""

    status: Literal["cancelled"] = "cancelled"


@dataclass(frozen=True)
class Faulted:
    """The action raised an error; the original exception is kept."""

    error: BaseException
    status: Literal["faulted"] = "faulted"


OperationOutcome = Completed | Cancelled | Faulted

ActionProvider = Callable[[threading.Event], Awaitable[object]]
CancelCondition = Callable[[], bool]


class OperationState(Enum):
    """Lifecycle state of a CancellableOperation."""

    IDLE = "idle"
    RUNNING = "running"


class CancellableOperation:
    """
    Coordinates one action with a cancellation watcher.

    The action receives a threading.Event it must check cooperatively and
    raise OperationCancelledError once it is set. A watcher thread evaluates
    the cancel condition until it returns True (setting the event) or the
    action finishes. Each run yields exactly one outcome, then the optional
    on_outcome and on_finished callbacks fire in that order.

    Usage:
        operation = CancellableOperation(
            lambda stop: writer.run(stop),
            key_listener.escape_pressed,
        )
        outcome = await operation.run()
    """

    def __init__(
        self,
        action_provider: ActionProvider,
        cancel_condition: CancelCondition,
        on_outcome: Optional[Callable[[OperationOutcome], None]] = None,
        on_finished: Optional[Callable[[], None]] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ):
        """
        Initialize the operation.

        Args:
            action_provider: Called with the run's stop event, returns the awaitable to run
            cancel_condition: Returns True when the action should be cancelled
            on_outcome: Called once per run with the outcome
            on_finished: Called once per run after on_outcome, regardless of outcome
            poll_interval: Seconds to wait between cancel condition checks
        """
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")

        self._action_provider = action_provider
        self._cancel_condition = cancel_condition
        self._on_outcome = on_outcome
        self._on_finished = on_finished
        self._poll_interval = poll_interval

        self._stop_event: Optional[threading.Event] = None
        self._done_event: Optional[threading.Event] = None
        self._state = OperationState.IDLE

    @property
    def state(self) -> OperationState:
        """Current lifecycle state."""
        return self._state

    def cancel(self) -> None:
        """Request the active run, if any, to stop."""
        if self._stop_event is not None:
            self._stop_event.set()

    async def run(self) -> OperationOutcome:
        """
        Run the action until it completes, is cancelled, or fails.

        A run started while another is active first asks the previous one
        to stop.

        Returns:
            The outcome of this run
        """
        self.cancel()
        if self._done_event is not None:
            self._done_event.set()

        stop_event = threading.Event()
        done_event = threading.Event()
        self._stop_event = stop_event
        self._done_event = done_event
        self._state = OperationState.RUNNING

        watcher = asyncio.create_task(
            asyncio.to_thread(self._wait_for_cancellation, stop_event, done_event)
        )

        action = asyncio.ensure_future(self._run_action(stop_event))
        try:
            outcome = await asyncio.shield(action)
        except asyncio.CancelledError:
            # the caller gave up; the action must still unwind before we do
            logger.info("Operation run cancelled by caller, stopping action")
            stop_event.set()
            await action
            raise
        finally:
            done_event.set()
            await watcher
            if self._stop_event is stop_event:
                self._state = OperationState.IDLE

        logger.debug(f"Operation finished with outcome: {outcome.status}")

        self._notify(self._on_outcome, outcome)
        self._notify(self._on_finished)

        return outcome

    def _notify(self, callback: Optional[Callable[..., None]], *args) -> None:
        """Invoke a callback; its errors are logged, never raised."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Operation callback {callback!r} failed: {e}", exc_info=True)

    async def _run_action(self, stop_event: threading.Event) -> OperationOutcome:
        """Await the action and map how it ended to an outcome."""
        try:
            await self._action_provider(stop_event)
        except OperationCancelledError:
            logger.info("Operation cancelled")
            return Cancelled()
        except Exception as e:
            logger.error(f"Operation faulted: {e}", exc_info=True)
            return Faulted(e)
        return Completed()

    def _wait_for_cancellation(self, stop_event: threading.Event, done_event: threading.Event) -> bool:
        """
        Poll the cancel condition until it fires or the action is done.

        Returns:
            True if cancellation was requested by the condition
        """
        while not done_event.is_set():
            try:
                cancel_requested = self._cancel_condition()
            except Exception as e:
                logger.error(f"Cancel condition failed, no longer polling: {e}", exc_info=True)
                return False

            if cancel_requested:
                logger.debug("Cancel condition met, signalling action to stop")
                stop_event.set()
                return True

            done_event.wait(self._poll_interval)
        return False
