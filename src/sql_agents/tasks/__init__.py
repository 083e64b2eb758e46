"""
Task agent plumbing shared by the agent servers, on top of the A2A SDK.

Contains:
- executor.py: TaskAgentExecutor state machine and CancellationRegistry
- server.py: AgentRequestHandler and the FastAPI app builder
"""

from .executor import CancellationRegistry, TaskAgentExecutor, first_text
from .server import AgentRequestHandler, build_agent_app

__all__ = [
    "AgentRequestHandler",
    "CancellationRegistry",
    "TaskAgentExecutor",
    "build_agent_app",
    "first_text",
]
