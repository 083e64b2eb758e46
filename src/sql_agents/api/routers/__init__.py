"""
API routers package.
"""

from sql_agents.api.routers.queries import router as queries_router

__all__ = ["queries_router"]
