"""
Rewriting of parsed view predicates.
"""

from view_schema.rewriter.relation_rewriter import referenced_columns, rename_identifier

__all__ = ["referenced_columns", "rename_identifier"]
