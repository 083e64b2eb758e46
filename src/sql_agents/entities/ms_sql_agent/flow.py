"""
Generate-query flow: natural language (with schema context) to MS SQL.
"""

import logging
from functools import lru_cache
from pathlib import Path

from sql_agents.llm import OllamaChatClient

logger = logging.getLogger(__name__)


@lru_cache
def _load_prompt() -> str:
    """Load prompt template from prompt.md in this folder."""
    prompt_path = Path(__file__).parent / "prompt.md"

    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {prompt_path}")

    return prompt_path.read_text(encoding="utf-8").strip()


def build_generation_prompt(schema: str, question: str) -> str:
    """Render the generation prompt for a schema document and a user ask."""
    return _load_prompt().format(schema=schema, question=question)


class GenerateQueryFlow:
    """
    Passthrough flow: the caller builds the prompt, the model answers.

    The output is the raw model text; it is not validated as SQL.
    """

    name = "msSqlFlow"

    def __init__(self, llm: OllamaChatClient):
        self.llm = llm

    async def run(self, prompt: str) -> str:
        if not isinstance(prompt, str):
            raise TypeError(f"{self.name} expects a string prompt")
        logger.info("Running %s (%d chars)", self.name, len(prompt))
        return await self.llm.generate(prompt)
