"""
Builders for materialized view definitions.
"""

from view_schema.builder.view_builder import build_view_definition

__all__ = ["build_view_definition"]
