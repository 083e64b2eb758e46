"""
Aggregator API package.

Contains:
- main.py: FastAPI application factory with lifespan management
- models.py: Pydantic models for API requests/responses
- dependencies.py: FastAPI dependencies
- jobs.py: in-memory job store
- pipeline.py: generate-then-optimize pipeline
- routers/: route handlers
"""

from sql_agents.api.main import create_app

__all__ = ["create_app"]
