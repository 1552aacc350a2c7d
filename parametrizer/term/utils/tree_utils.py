"""
Tree Utility Functions

Traversal and analysis helpers for term trees. Traversals are iterative so
that deep, programmatically composed trees do not hit the recursion limit.
"""

from collections import deque
from typing import List, Type

from ..core.node import Term, ConstantTerm, ParameterTerm, UnaryFuncTerm, FunctionTerm


def get_all_nodes(term: Term, traversal_order: str = 'breadth_first') -> List[Term]:
    """
    Get all nodes in the tree using specified traversal order.

    Args:
        term: Root of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first'

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(term)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(term)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(term: Term) -> List[Term]:
    nodes_to_visit = deque([term])
    all_nodes = []

    while nodes_to_visit:
        current = nodes_to_visit.popleft()
        all_nodes.append(current)
        nodes_to_visit.extend(current.children())

    return all_nodes


def _depth_first_traversal(term: Term) -> List[Term]:
    """Pre-order, children left to right"""
    stack = [term]
    all_nodes = []

    while stack:
        current = stack.pop()
        all_nodes.append(current)
        stack.extend(reversed(current.children()))

    return all_nodes


def calculate_tree_depth(term: Term) -> int:
    """
    Calculate the maximum depth of the tree.

    Args:
        term: Root of the tree

    Returns:
        Maximum depth (leaf nodes have depth 1)
    """
    max_depth = 0
    stack = [(term, 1)]

    while stack:
        current, depth = stack.pop()
        max_depth = max(max_depth, depth)
        for child in current.children():
            stack.append((child, depth + 1))

    return max_depth


def find_nodes_by_type(term: Term, node_type: Type[Term]) -> List[Term]:
    """
    Find all nodes of a specific class in the tree.

    Args:
        term: Root of the tree
        node_type: Class of nodes to find (e.g., ConstantTerm, ParameterTerm)

    Returns:
        List of matching nodes in breadth-first order
    """
    return [node for node in _breadth_first_traversal(term) if isinstance(node, node_type)]


def get_constants(term: Term) -> List[float]:
    """Constant values in depth-first (reading) order"""
    return [node.value for node in _depth_first_traversal(term) if isinstance(node, ConstantTerm)]


def get_function_names(term: Term) -> List[str]:
    """Names of the functions applied anywhere in the tree, first use first, without duplicates"""
    names = []
    for node in _depth_first_traversal(term):
        if isinstance(node, FunctionTerm) or (isinstance(node, UnaryFuncTerm) and node.name != 'neg'):
            if node.name not in names:
                names.append(node.name)
    return names


def uses_parameter(term: Term) -> bool:
    """False when the tree evaluates to the same value for every parameter"""
    return any(isinstance(node, ParameterTerm) for node in _breadth_first_traversal(term))
