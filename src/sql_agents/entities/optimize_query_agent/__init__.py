"""
MS-SQL Optimize Query Agent.

Run with:
    ms-sql-optimize-query-agent
"""

from .executor import MsSqlOptimizeQueryAgentExecutor
from .flow import OptimizeQueryFlow, QueryOptimizationError

__all__ = ["MsSqlOptimizeQueryAgentExecutor", "OptimizeQueryFlow", "QueryOptimizationError"]
