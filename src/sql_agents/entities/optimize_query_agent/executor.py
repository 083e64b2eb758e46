"""
MS-SQL Optimize Query Agent Executor.

Publishes the optimized query as a file artifact, then completes the task
with a short confirmation.
"""

from a2a.server.agent_execution import RequestContext
from a2a.server.tasks import TaskUpdater
from a2a.types import Part, TextPart

from sql_agents.tasks import CancellationRegistry, TaskAgentExecutor

from .flow import OptimizeQueryFlow

ARTIFACT_ID = "optimized-ms-sql-query"
ARTIFACT_NAME = "optimized-ms-sql-query.sql"


class MsSqlOptimizeQueryAgentExecutor(TaskAgentExecutor):
    """Executor that optimizes a MS SQL query given as message text."""

    name = "MsSqlOptimizeQueryAgentExecutor"
    working_text = "Optimizing MS-SQL query..."
    missing_input_text = "No SQL query provided for optimization."
    completed_text = "Optimized MS-SQL query."

    def __init__(self, flow: OptimizeQueryFlow, cancellations: CancellationRegistry | None = None):
        super().__init__(cancellations)
        self.flow = flow

    async def process(self, text: str, context: RequestContext) -> str:
        return await self.flow.run(text)

    async def publish_result(self, result: str, updater: TaskUpdater, context: RequestContext) -> None:
        await updater.add_artifact(
            [Part(root=TextPart(text=result))],
            artifact_id=ARTIFACT_ID,
            name=ARTIFACT_NAME,
            append=False,
            last_chunk=True,
        )
        await updater.complete(self.agent_message(self.completed_text, context))
