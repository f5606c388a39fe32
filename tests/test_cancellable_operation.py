"""Tests for the cancellable operation coordinator."""

import asyncio
import threading
import time
import uuid

import pytest

from filler.cancellable_operation import (
    CancellableOperation,
    Cancelled,
    Completed,
    Faulted,
    OperationState,
)
from filler.exceptions import OperationCancelledError
from filler.sized_file_writer import SizedFileWriter
from filler.types import FillPolicy


def sleeping_action(delay: float, record: dict, error: Exception = None):
    """
    Build an action provider that sleeps on a worker thread, then checks its stop signal.

    Args:
        delay: Seconds to sleep before checking the stop signal
        record: Dict that receives 'completed': True when the action finishes
        error: Optional exception to raise instead of completing
    """
    def provider(stop_event: threading.Event):
        def work():
            time.sleep(delay)
            if error is not None:
                raise error
            if stop_event.is_set():
                raise OperationCancelledError()
            record['completed'] = True

        return asyncio.to_thread(work)

    return provider


def delayed_condition(delay: float, result: bool):
    def condition() -> bool:
        time.sleep(delay)
        return result
    return condition


@pytest.mark.asyncio
async def test_run_completes_when_not_cancelled():
    record = {}
    operation = CancellableOperation(sleeping_action(0.2, record), lambda: False)

    outcome = await operation.run()

    assert outcome == Completed()
    assert record.get('completed') is True


@pytest.mark.asyncio
@pytest.mark.parametrize("action_delay,cancel_delay,expected_completion", [
    (1.0, 0.05, False),
    (0.05, 1.0, True),
])
async def test_run_cancels_action_appropriately(action_delay, cancel_delay, expected_completion):
    record = {}
    operation = CancellableOperation(
        sleeping_action(action_delay, record),
        delayed_condition(cancel_delay, True),
    )

    outcome = await operation.run()

    assert record.get('completed', False) is expected_completion
    assert isinstance(outcome, Completed if expected_completion else Cancelled)


@pytest.mark.asyncio
@pytest.mark.parametrize("cancel_action,expected", [
    (False, Completed),
    (True, Cancelled),
])
async def test_outcome_reflects_cancel_condition(cancel_action, expected):
    outcomes = []
    operation = CancellableOperation(
        sleeping_action(0.3, {}),
        lambda: cancel_action,
        on_outcome=outcomes.append,
    )

    outcome = await operation.run()

    assert isinstance(outcome, expected)
    assert outcomes == [outcome]


@pytest.mark.asyncio
@pytest.mark.parametrize("fault_action", [False, True])
async def test_faulted_outcome_carries_original_error(fault_action):
    message = str(uuid.uuid4())
    error = RuntimeError(message)
    outcomes = []
    operation = CancellableOperation(
        sleeping_action(0.2, {}, error=error if fault_action else None),
        lambda: False,
        on_outcome=outcomes.append,
    )

    outcome = await operation.run()

    if fault_action:
        assert isinstance(outcome, Faulted)
        assert outcome.error is error
        assert str(outcome.error) == message
    else:
        assert isinstance(outcome, Completed)
    assert len(outcomes) == 1


@pytest.mark.asyncio
async def test_error_raised_by_provider_is_faulted():
    def provider(stop_event):
        raise ValueError("bad provider")

    outcome = await CancellableOperation(provider, lambda: False).run()

    assert isinstance(outcome, Faulted)
    assert isinstance(outcome.error, ValueError)


@pytest.mark.asyncio
@pytest.mark.parametrize("cancel_action", [False, True])
async def test_finished_fires_once_after_outcome(cancel_action):
    events = []
    operation = CancellableOperation(
        sleeping_action(0.3, {}),
        lambda: cancel_action,
        on_outcome=lambda outcome: events.append(('outcome', outcome.status)),
        on_finished=lambda: events.append(('finished', None)),
    )

    await operation.run()

    assert len(events) == 2
    assert events[0][0] == 'outcome'
    assert events[1] == ('finished', None)


@pytest.mark.asyncio
async def test_finished_fires_after_fault():
    events = []
    operation = CancellableOperation(
        sleeping_action(0.05, {}, error=OSError("disk")),
        lambda: False,
        on_outcome=lambda outcome: events.append(outcome.status),
        on_finished=lambda: events.append('finished'),
    )

    await operation.run()

    assert events == ['faulted', 'finished']


@pytest.mark.asyncio
async def test_failing_cancel_condition_does_not_cancel():
    def condition():
        raise RuntimeError("keyboard unavailable")

    record = {}
    outcome = await CancellableOperation(sleeping_action(0.1, record), condition).run()

    assert isinstance(outcome, Completed)
    assert record['completed'] is True


@pytest.mark.asyncio
async def test_failing_outcome_callback_still_finishes():
    def on_outcome(outcome):
        raise BrokenPipeError("stdout closed")

    finished = []
    operation = CancellableOperation(
        sleeping_action(0.05, {}),
        lambda: False,
        on_outcome=on_outcome,
        on_finished=lambda: finished.append(True),
    )

    outcome = await operation.run()

    assert isinstance(outcome, Completed)
    assert finished == [True]


@pytest.mark.asyncio
async def test_failing_finished_callback_does_not_escape():
    def on_finished():
        raise OSError("console gone")

    outcome = await CancellableOperation(sleeping_action(0.05, {}), lambda: True, on_finished=on_finished).run()

    assert isinstance(outcome, Cancelled)


@pytest.mark.asyncio
async def test_watcher_stops_polling_after_completion():
    calls = []

    def condition():
        calls.append(time.monotonic())
        return False

    operation = CancellableOperation(sleeping_action(0.1, {}), condition)
    await operation.run()
    count = len(calls)

    await asyncio.sleep(0.1)

    assert len(calls) == count


@pytest.mark.asyncio
async def test_state_is_running_only_during_run():
    seen = []
    operation = None

    async def action(stop_event):
        seen.append(operation.state)

    operation = CancellableOperation(action, lambda: False)
    assert operation.state is OperationState.IDLE

    await operation.run()

    assert seen == [OperationState.RUNNING]
    assert operation.state is OperationState.IDLE


@pytest.mark.asyncio
async def test_cancel_stops_active_run():
    operation = None

    async def action(stop_event):
        operation.cancel()
        await asyncio.to_thread(stop_event.wait, 5)
        if stop_event.is_set():
            raise OperationCancelledError()

    operation = CancellableOperation(action, lambda: False)

    assert isinstance(await operation.run(), Cancelled)


@pytest.mark.asyncio
async def test_new_run_cancels_previous_run():
    stop_events = []

    async def action(stop_event):
        stop_events.append(stop_event)
        if len(stop_events) == 1:
            while not stop_event.is_set():
                await asyncio.sleep(0.01)
            raise OperationCancelledError()

    operation = CancellableOperation(action, lambda: False)

    first = asyncio.create_task(operation.run())
    while not stop_events:
        await asyncio.sleep(0.01)

    second_outcome = await operation.run()
    first_outcome = await first

    assert isinstance(first_outcome, Cancelled)
    assert isinstance(second_outcome, Completed)
    assert operation.state is OperationState.IDLE


def test_non_positive_poll_interval_rejected():
    with pytest.raises(ValueError):
        CancellableOperation(sleeping_action(0, {}), lambda: False, poll_interval=0)


class TestWithSizedFileWriter:
    """Run the file writer under the coordinator."""

    @pytest.mark.asyncio
    async def test_completed_write(self, make_spec, target_path):
        progress = []

        def action(stop_event):
            writer = SizedFileWriter(make_spec(size=8, template="1234"), on_progress=progress.append)
            return writer.run(stop_event)

        outcome = await CancellableOperation(action, lambda: False).run()

        assert isinstance(outcome, Completed)
        assert target_path.read_bytes() == b"12341234"
        assert progress == [0.0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pre_existing", [True, False])
    async def test_cancelled_write_leaves_target_untouched(self, make_spec, target_path, staging_dir, pre_existing):
        if pre_existing:
            target_path.write_bytes(b"keep me")
        cancel_requested = threading.Event()
        outcomes = []
        finished = []

        def action(stop_event):
            def on_progress(fraction):
                cancel_requested.set()
                stop_event.wait(5)

            writer = SizedFileWriter(
                make_spec(size=64, policy=FillPolicy.FIXED, template="AB", append=pre_existing),
                on_progress=on_progress,
                chunk_size=16,
                staging_dir=staging_dir,
            )
            return writer.run(stop_event)

        operation = CancellableOperation(
            action,
            cancel_requested.is_set,
            on_outcome=outcomes.append,
            on_finished=lambda: finished.append(True),
        )

        outcome = await operation.run()

        assert isinstance(outcome, Cancelled)
        assert outcomes == [outcome]
        assert finished == [True]
        assert list(staging_dir.iterdir()) == []
        if pre_existing:
            assert target_path.read_bytes() == b"keep me"
        else:
            assert not target_path.exists()

    @pytest.mark.asyncio
    async def test_cancelled_run_task_stops_write_before_raising(self, make_spec, target_path, staging_dir):
        target_path.write_bytes(b"keep me")
        writing = threading.Event()

        def action(stop_event):
            def on_progress(fraction):
                writing.set()
                time.sleep(0.01)

            writer = SizedFileWriter(
                make_spec(size=200, policy=FillPolicy.FIXED, template="AB"),
                on_progress=on_progress,
                chunk_size=2,
                staging_dir=staging_dir,
            )
            return writer.run(stop_event)

        operation = CancellableOperation(action, lambda: False)
        task = asyncio.create_task(operation.run())
        while not writing.is_set():
            await asyncio.sleep(0.01)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert target_path.read_bytes() == b"keep me"
        assert list(staging_dir.iterdir()) == []
        assert operation.state is OperationState.IDLE

    @pytest.mark.asyncio
    async def test_faulted_write_reports_io_error(self, make_spec, target_path, staging_dir, monkeypatch):
        import filler.sized_file_writer as writer_module

        def failing_replace(src, dst):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(writer_module.os, "replace", failing_replace)

        def action(stop_event):
            return SizedFileWriter(make_spec(), staging_dir=staging_dir).run(stop_event)

        outcome = await CancellableOperation(action, lambda: False).run()

        assert isinstance(outcome, Faulted)
        assert isinstance(outcome.error, PermissionError)
        assert not target_path.exists()
        assert list(staging_dir.iterdir()) == []
