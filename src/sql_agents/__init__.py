"""
SQL agents: LLM-backed MS-SQL query generation and optimization.

Contains:
- api/: aggregator FastAPI application chaining both prompt flows
- entities/: the MS-SQL agent and the optimize-query agent
- llm/: client for the local model-serving endpoint
- tasks/: executor base and request handler on top of the A2A SDK
- config.py: settings loaded from the environment
"""

__version__ = "0.0.1"
