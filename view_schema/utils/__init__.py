"""
Utility functions for view schema management.
"""

from view_schema.utils.sql_formatter import format_sql, highlight_position
from view_schema.utils.warnings import SchemaWarning, WarningCollector

__all__ = [
    "SchemaWarning",
    "WarningCollector",
    "format_sql",
    "highlight_position",
]
