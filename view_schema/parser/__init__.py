"""
Parser module for view predicates and statements.

This module provides the grammar engine protocol, its sqlglot
implementation and the query text builder.
"""

from view_schema.parser.grammar import GrammarEngine
from view_schema.parser.query_builder import build_select_statement
from view_schema.parser.sqlglot_grammar import SqlGlotGrammar, default_grammar

__all__ = [
    "GrammarEngine",
    "SqlGlotGrammar",
    "build_select_statement",
    "default_grammar",
]
