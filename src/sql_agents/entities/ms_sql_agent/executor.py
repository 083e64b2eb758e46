"""
MS-SQL Agent Executor.

Loads the live database schema, asks the model for a MS SQL query answering
the user's request and completes the task with the query as its message.
"""

import logging

from a2a.server.agent_execution import RequestContext

from sql_agents.tasks import CancellationRegistry, TaskAgentExecutor

from .flow import GenerateQueryFlow, build_generation_prompt
from .tools import SchemaIntrospector

logger = logging.getLogger(__name__)


class MsSqlAgentExecutor(TaskAgentExecutor):
    """
    Executor that turns a natural-language request into a MS SQL query.

    This executor:
    1. Introspects the database schema on every request (no caching)
    2. Builds the generation prompt from schema and user ask
    3. Completes the task with the generated query text
    """

    name = "MsSqlAgentExecutor"
    working_text = "Processing your request..."
    missing_input_text = "No input provided."

    def __init__(
        self,
        introspector: SchemaIntrospector,
        flow: GenerateQueryFlow,
        cancellations: CancellationRegistry | None = None,
    ):
        super().__init__(cancellations)
        self.introspector = introspector
        self.flow = flow

    async def process(self, text: str, context: RequestContext) -> str:
        schema = await self.introspector.load_schema()
        logger.debug("[%s] Schema generated: %s", self.name, schema)
        return await self.flow.run(build_generation_prompt(schema, text))
