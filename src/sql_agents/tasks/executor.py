"""
Shared task executor state machine.

    submitted --(initial Task)--> working --(status: working)-->
        { completed | failed | canceled } --(final status/artifact)--> [terminal]

Subclasses supply the user-facing messages, the flow step and how a result
is published. Every execution publishes exactly one final status event.
"""

import logging
from datetime import datetime, timezone

from a2a.server.agent_execution import AgentExecutor, RequestContext
from a2a.server.events import EventQueue
from a2a.server.tasks import TaskUpdater
from a2a.types import Message, Task, TaskState, TaskStatus, TextPart
from a2a.utils import new_agent_text_message

logger = logging.getLogger(__name__)


def first_text(message: Message | None) -> str | None:
    """Text of the first text part of a message, if any."""
    if message is None:
        return None
    for part in message.parts:
        if isinstance(part.root, TextPart):
            return part.root.text
    return None


class CancellationRegistry:
    """
    Task IDs whose results must not be delivered.

    Cancellation is cooperative: executors consult the registry at a single
    checkpoint after the flow call returns. A running model call is never
    interrupted.
    """

    def __init__(self) -> None:
        self._task_ids: set[str] = set()

    def cancel(self, task_id: str) -> None:
        self._task_ids.add(task_id)

    def is_cancelled(self, task_id: str) -> bool:
        return task_id in self._task_ids


class TaskAgentExecutor(AgentExecutor):
    """
    Base executor driving one task through its lifecycle.

    Subclasses implement process() and may override publish_result().
    """

    name = "TaskAgentExecutor"
    working_text = "Processing your request..."
    missing_input_text = "No input provided."

    def __init__(self, cancellations: CancellationRegistry | None = None):
        self.cancellations = cancellations or CancellationRegistry()
        self._running: set[str] = set()

    def is_running(self, task_id: str) -> bool:
        """Whether an execution for the task has started and not yet returned."""
        return task_id in self._running

    def cancel_task(self, task_id: str) -> None:
        """Record a cancellation, honoured at the post-flow checkpoint only."""
        logger.info("[%s] Cancellation requested for task %s", self.name, task_id)
        self.cancellations.cancel(task_id)

    async def cancel(self, context: RequestContext, event_queue: EventQueue) -> None:
        # The running execution publishes the canceled status at its checkpoint.
        self.cancel_task(context.task_id)

    async def process(self, text: str, context: RequestContext) -> str:
        """Run the agent's flow on the input text and return the result."""
        raise NotImplementedError

    def agent_message(self, text: str, context: RequestContext) -> Message:
        return new_agent_text_message(text, context.context_id, context.task_id)

    async def publish_result(self, result: str, updater: TaskUpdater, context: RequestContext) -> None:
        """Publish the successful outcome, ending with a final status."""
        await updater.complete(self.agent_message(result, context))

    async def execute(self, context: RequestContext, event_queue: EventQueue) -> None:
        task_id = context.task_id

        logger.info(
            "[%s] Processing message %s for task %s (context: %s)",
            self.name, context.message.message_id, task_id, context.context_id,
        )

        self._running.add(task_id)
        try:
            await self._run(context, event_queue)
        finally:
            self._running.discard(task_id)

    async def _run(self, context: RequestContext, event_queue: EventQueue) -> None:
        task_id = context.task_id
        context_id = context.context_id

        if context.current_task is None:
            await event_queue.enqueue_event(
                Task(
                    id=task_id,
                    context_id=context_id,
                    status=TaskStatus(
                        state=TaskState.submitted,
                        timestamp=datetime.now(timezone.utc).isoformat(),
                    ),
                    history=[context.message],
                    metadata=context.message.metadata,
                )
            )

        updater = TaskUpdater(event_queue, task_id, context_id)
        await updater.update_status(TaskState.working, self.agent_message(self.working_text, context))

        text = first_text(context.message)
        if not text:
            await updater.failed(self.agent_message(self.missing_input_text, context))
            return

        try:
            result = await self.process(text, context)
        except Exception as e:
            logger.exception("[%s] Error processing task %s", self.name, task_id)
            await updater.failed(self.agent_message(f"Agent error: {e}", context))
            return

        # Single cancellation checkpoint
        if self.cancellations.is_cancelled(task_id):
            logger.info("[%s] Request cancelled for task: %s", self.name, task_id)
            await updater.cancel()
            return

        await self.publish_result(result, updater, context)
        logger.info("[%s] Task %s finished with state: completed", self.name, task_id)
