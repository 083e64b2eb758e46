"""
Generate-then-optimize pipeline used by the aggregator API.

Calls both prompt flows directly; no agent server or task lifecycle is
involved.
"""

import logging

from sql_agents.entities.ms_sql_agent.flow import GenerateQueryFlow, build_generation_prompt
from sql_agents.entities.optimize_query_agent.flow import OptimizeQueryFlow

logger = logging.getLogger(__name__)


class QueryPipeline:
    """Generate a MS SQL query from a natural-language ask, then optimize it."""

    def __init__(self, generate_flow: GenerateQueryFlow, optimize_flow: OptimizeQueryFlow):
        self.generate_flow = generate_flow
        self.optimize_flow = optimize_flow

    async def run(self, question: str, schema: str) -> str:
        """Return the optimized query for a question against the given schema."""
        generated_query = await self.generate_flow.run(build_generation_prompt(schema, question))
        logger.info("Generated query: %s", generated_query[:200])

        optimized_query = await self.optimize_flow.run(generated_query)
        logger.info("Optimized query: %s", optimized_query[:200])
        return optimized_query
