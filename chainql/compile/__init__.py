"""chainQL compilation layer: clause buckets, parameters, rendering."""
from chainql.compile.clauses import ClauseKind, ClauseRegistry, Keyword
from chainql.compile.merger import merge_subquery
from chainql.compile.parameters import ParameterTable
from chainql.compile.renderer import compile_statement, prettify

__all__ = [
    "ClauseKind",
    "ClauseRegistry",
    "Keyword",
    "ParameterTable",
    "compile_statement",
    "merge_subquery",
    "prettify",
]
