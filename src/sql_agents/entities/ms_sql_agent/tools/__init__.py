"""
Tools for the MS-SQL agent.

Provides database schema introspection used as prompt context.
"""

from .schema import NO_TABLES, SchemaIntrospector, quote_identifier

__all__ = ["NO_TABLES", "SchemaIntrospector", "quote_identifier"]
