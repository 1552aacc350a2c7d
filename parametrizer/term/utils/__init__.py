"""Utilities for term trees."""

from .sympy_utils import term_from_sympy, to_sympy_expression
from .tree_utils import (
    get_all_nodes, calculate_tree_depth, find_nodes_by_type,
    get_constants, get_function_names, uses_parameter
)

__all__ = [
    'term_from_sympy', 'to_sympy_expression',
    'get_all_nodes', 'calculate_tree_depth', 'find_nodes_by_type',
    'get_constants', 'get_function_names', 'uses_parameter'
]
