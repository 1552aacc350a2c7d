"""Term Tree Module

Immutable expression tree nodes for single-parameter functions, plus the
JIT-compiled operator kernels they evaluate through.
"""

from .core.node import (
  Term,
  ParameterTerm,
  ConstantTerm,
  BinaryOpTerm,
  UnaryFuncTerm,
  FunctionTerm,
  PiecewiseTerm
)
from .core.operators import (
  NodeType,
  OpType,
  BINARY_OP_MAP,
  UNARY_OP_MAP,
  DEFAULT_FUNCTION_NAMES,
  evaluate_binary_op,
  evaluate_unary_op
)
from .utils import (
  term_from_sympy, to_sympy_expression,
  get_all_nodes, calculate_tree_depth, find_nodes_by_type,
  get_constants, get_function_names, uses_parameter
)

__all__ = [
  "Term", "ParameterTerm", "ConstantTerm", "BinaryOpTerm", "UnaryFuncTerm",
  "FunctionTerm", "PiecewiseTerm",
  "NodeType", "OpType",
  "BINARY_OP_MAP", "UNARY_OP_MAP", "DEFAULT_FUNCTION_NAMES",
  "evaluate_binary_op", "evaluate_unary_op",
  "term_from_sympy", "to_sympy_expression",
  "get_all_nodes", "calculate_tree_depth", "find_nodes_by_type",
  "get_constants", "get_function_names", "uses_parameter"
]
