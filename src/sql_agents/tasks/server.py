"""
FastAPI application for one task agent.

The JSON-RPC endpoint, SSE streaming and the task store come from the A2A
SDK. AgentRequestHandler narrows DefaultRequestHandler to the lifecycle the
executors implement: one execution per task at a time and cooperative
cancellation.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable

from a2a.server.apps import A2AFastAPIApplication
from a2a.server.context import ServerCallContext
from a2a.server.events import Event
from a2a.server.request_handlers import DefaultRequestHandler
from a2a.server.tasks import InMemoryTaskStore, TaskStore
from a2a.types import (
    AgentCard,
    InvalidParamsError,
    Message,
    MessageSendParams,
    Task,
    TaskIdParams,
    TaskNotCancelableError,
    TaskNotFoundError,
    TaskState,
)
from a2a.utils.errors import ServerError
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .executor import TaskAgentExecutor

logger = logging.getLogger(__name__)

AGENT_CARD_PATH = "/.well-known/agent-card.json"
LEGACY_AGENT_CARD_PATH = "/.well-known/agent.json"

TERMINAL_STATES = frozenset(
    {TaskState.completed, TaskState.failed, TaskState.canceled, TaskState.rejected}
)


class AgentRequestHandler(DefaultRequestHandler):
    """
    Request handler for TaskAgentExecutor agents.

    - A message naming a task that is still executing is rejected, so a task
      never gets a second terminal event from an overlapping run
    - tasks/cancel records the ID with the executor and returns the current
      task; the running execution publishes the canceled status itself
    """

    def __init__(self, executor: TaskAgentExecutor, task_store: TaskStore | None = None):
        super().__init__(agent_executor=executor, task_store=task_store or InMemoryTaskStore())
        self.executor = executor

    def _reject_running(self, params: MessageSendParams) -> None:
        task_id = params.message.task_id
        if task_id and self.executor.is_running(task_id):
            logger.warning("Rejected message %s for running task %s", params.message.message_id, task_id)
            raise ServerError(error=InvalidParamsError(message=f"Task {task_id} is still running"))

    async def on_message_send(
        self,
        params: MessageSendParams,
        context: ServerCallContext | None = None,
    ) -> Message | Task:
        self._reject_running(params)
        return await super().on_message_send(params, context)

    async def on_message_send_stream(
        self,
        params: MessageSendParams,
        context: ServerCallContext | None = None,
    ) -> AsyncGenerator[Event, None]:
        self._reject_running(params)
        async for event in super().on_message_send_stream(params, context):
            yield event

    async def on_cancel_task(
        self,
        params: TaskIdParams,
        context: ServerCallContext | None = None,
    ) -> Task | None:
        task = await self.task_store.get(params.id)
        if task is None:
            raise ServerError(error=TaskNotFoundError())
        if task.status.state in TERMINAL_STATES:
            raise ServerError(
                error=TaskNotCancelableError(
                    message=f"Task cannot be canceled - current state: {task.status.state.value}"
                )
            )

        self.executor.cancel_task(task.id)
        return task


def build_agent_app(
    agent_card: AgentCard,
    executor: TaskAgentExecutor,
    *,
    title: str,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    """
    Create the FastAPI application for one agent.

    Args:
        agent_card: Card served at the well-known paths
        executor: The agent's executor
        title: Application title
        on_shutdown: Optional coroutine function run when the app stops
    """
    handler = AgentRequestHandler(executor)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        application.state.request_handler = handler
        logger.info("%s initialized at %s", agent_card.name, agent_card.url)
        logger.info("Agent Card: %s%s", agent_card.url.rstrip("/"), AGENT_CARD_PATH)

        yield

        if on_shutdown is not None:
            await on_shutdown()
        logger.info("%s shutdown complete", agent_card.name)

    app = A2AFastAPIApplication(agent_card=agent_card, http_handler=handler).build(
        agent_card_url=AGENT_CARD_PATH,
        rpc_url="/",
        title=title,
        lifespan=lifespan,
    )

    @app.get(LEGACY_AGENT_CARD_PATH, tags=["discovery"])
    async def legacy_agent_card():
        return JSONResponse(agent_card.model_dump(mode="json", by_alias=True, exclude_none=True))

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        agent_ready = getattr(request.app.state, "request_handler", None) is not None
        return {"status": "healthy", "agent_ready": agent_ready}

    return app
