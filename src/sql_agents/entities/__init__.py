"""
Agent entities.

Each subdirectory is one agent:
- ms_sql_agent/: natural language to MS SQL, using live schema introspection
- optimize_query_agent/: MS SQL query optimization
"""
