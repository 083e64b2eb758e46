"""
Optimize-query flow: rewrite a MS SQL query for performance.
"""

import logging
from functools import lru_cache
from pathlib import Path

from sql_agents.llm import OllamaChatClient

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.3


class QueryOptimizationError(RuntimeError):
    """Raised when the model returns no optimized query."""


@lru_cache
def _load_prompt() -> str:
    """Load prompt template from prompt.md in this folder."""
    prompt_path = Path(__file__).parent / "prompt.md"

    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {prompt_path}")

    return prompt_path.read_text(encoding="utf-8").strip()


class OptimizeQueryFlow:
    """Embeds the SQL in a fixed instruction prompt and asks for a rewrite."""

    name = "optimizeQueryFlow"

    def __init__(self, llm: OllamaChatClient, temperature: float = DEFAULT_TEMPERATURE):
        self.llm = llm
        self.temperature = temperature

    async def run(self, sql: str) -> str:
        if not isinstance(sql, str):
            raise TypeError(f"{self.name} expects a SQL string")

        prompt = _load_prompt().format(sql=sql)
        optimized_sql = await self.llm.generate(prompt, temperature=self.temperature)

        if not optimized_sql:
            raise QueryOptimizationError("Failed to optimize SQL query.")

        logger.info("%s returned %d chars", self.name, len(optimized_sql))
        return optimized_sql
