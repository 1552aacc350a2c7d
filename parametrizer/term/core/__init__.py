"""Core term tree components."""

from .node import (
    Term, ParameterTerm, ConstantTerm, BinaryOpTerm, UnaryFuncTerm,
    FunctionTerm, PiecewiseTerm, format_number
)
from .operators import (
    NodeType, OpType, BINARY_OP_MAP, UNARY_OP_MAP, DEFAULT_FUNCTION_NAMES,
    evaluate_binary_op, evaluate_unary_op
)

__all__ = [
    'Term', 'ParameterTerm', 'ConstantTerm', 'BinaryOpTerm', 'UnaryFuncTerm',
    'FunctionTerm', 'PiecewiseTerm', 'format_number',
    'NodeType', 'OpType', 'BINARY_OP_MAP', 'UNARY_OP_MAP', 'DEFAULT_FUNCTION_NAMES',
    'evaluate_binary_op', 'evaluate_unary_op'
]
