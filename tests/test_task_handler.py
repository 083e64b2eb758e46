# tests/test_task_handler.py

from __future__ import annotations

import asyncio

import pytest
from a2a.types import (
    InvalidParamsError,
    MessageSendParams,
    Task,
    TaskIdParams,
    TaskNotCancelableError,
    TaskNotFoundError,
    TaskState,
    TaskStatusUpdateEvent,
)
from a2a.utils.errors import ServerError

from sql_agents.entities.optimize_query_agent import MsSqlOptimizeQueryAgentExecutor, OptimizeQueryFlow
from sql_agents.tasks import AgentRequestHandler

from .conftest import user_message
from .fakes import FakeChatClient


def make_handler(llm: FakeChatClient) -> AgentRequestHandler:
    return AgentRequestHandler(MsSqlOptimizeQueryAgentExecutor(OptimizeQueryFlow(llm)))


async def collect(stream, events: list) -> None:
    async for event in stream:
        events.append(event)


async def wait_for_events(events: list, count: int) -> None:
    """Yield to the loop until the stream has produced `count` events."""
    async def poll():
        while len(events) < count:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout=2.0)


def finals(events: list) -> list[TaskStatusUpdateEvent]:
    return [e for e in events if isinstance(e, TaskStatusUpdateEvent) and e.final]


async def test_message_send_returns_completed_task() -> None:
    handler = make_handler(FakeChatClient(["SELECT Id FROM Orders"]))
    message = user_message("SELECT * FROM Orders")

    task = await handler.on_message_send(MessageSendParams(message=message))

    assert isinstance(task, Task)
    assert task.status.state is TaskState.completed
    assert task.history[0].message_id == message.message_id
    assert task.artifacts[0].parts[0].root.text == "SELECT Id FROM Orders"

    stored = await handler.task_store.get(task.id)
    assert stored.status.state is TaskState.completed


async def test_message_stream_yields_events_in_order() -> None:
    handler = make_handler(FakeChatClient(["SELECT 1"]))

    events = [e async for e in handler.on_message_send_stream(MessageSendParams(message=user_message("SELECT 1")))]

    assert [e.kind for e in events] == ["task", "status-update", "artifact-update", "status-update"]
    assert len(finals(events)) == 1
    assert finals(events)[0].status.state is TaskState.completed


async def test_message_to_running_task_is_rejected() -> None:
    gate = asyncio.Event()
    llm = FakeChatClient(["SELECT 1"], gate=gate)
    handler = make_handler(llm)
    events: list = []

    consumer = asyncio.create_task(
        collect(handler.on_message_send_stream(MessageSendParams(message=user_message("SELECT 1"))), events)
    )
    await llm.entered.wait()
    await wait_for_events(events, 2)
    task = events[0]

    followup = user_message("SELECT 2", task_id=task.id, context_id=task.context_id)
    with pytest.raises(ServerError) as excinfo:
        await handler.on_message_send(MessageSendParams(message=followup))
    assert isinstance(excinfo.value.error, InvalidParamsError)

    gate.set()
    await asyncio.wait_for(consumer, timeout=2.0)

    assert len(finals(events)) == 1
    assert len(llm.calls) == 1
    assert (await handler.task_store.get(task.id)).status.state is TaskState.completed


async def test_cancel_running_task_ends_canceled() -> None:
    gate = asyncio.Event()
    llm = FakeChatClient(["SELECT 1"], gate=gate)
    handler = make_handler(llm)
    events: list = []

    consumer = asyncio.create_task(
        collect(handler.on_message_send_stream(MessageSendParams(message=user_message("SELECT 1"))), events)
    )
    await llm.entered.wait()
    await wait_for_events(events, 2)
    task_id = events[0].id

    snapshot = await handler.on_cancel_task(TaskIdParams(id=task_id))
    assert snapshot.status.state is TaskState.working

    gate.set()
    await asyncio.wait_for(consumer, timeout=2.0)

    assert [e.status.state for e in finals(events)] == [TaskState.canceled]
    assert not any(e.kind == "artifact-update" for e in events)
    assert (await handler.task_store.get(task_id)).status.state is TaskState.canceled


async def test_cancel_unknown_task() -> None:
    handler = make_handler(FakeChatClient())

    with pytest.raises(ServerError) as excinfo:
        await handler.on_cancel_task(TaskIdParams(id="missing"))

    assert isinstance(excinfo.value.error, TaskNotFoundError)


async def test_cancel_terminal_task_is_rejected() -> None:
    handler = make_handler(FakeChatClient())
    task = await handler.on_message_send(MessageSendParams(message=user_message("SELECT 1")))

    with pytest.raises(ServerError) as excinfo:
        await handler.on_cancel_task(TaskIdParams(id=task.id))

    assert isinstance(excinfo.value.error, TaskNotCancelableError)
    assert not handler.executor.cancellations.is_cancelled(task.id)
