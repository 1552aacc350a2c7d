import numpy as np
import sympy as sp
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Tuple, Union
from .operators import (
  NodeType, OpType, BINARY_OP_MAP, UNARY_OP_MAP, BINARY_SYMBOLS, UNARY_NAMES,
  evaluate_binary_op, evaluate_unary_op, evaluate_cycle
)

# Exceptions a user supplied float -> float callable may raise for values
# outside its domain (math.sqrt(-1), math.log(0), 1 / 0, ...)
DOMAIN_ERRORS = (ArithmeticError, ValueError)

SYMPY_FUNCTIONS = {
  OpType.SIN: sp.sin,
  OpType.COS: sp.cos,
  OpType.TAN: sp.tan,
  OpType.ASIN: sp.asin,
  OpType.ACOS: sp.acos,
  OpType.ATAN: sp.atan,
  OpType.SINH: sp.sinh,
  OpType.COSH: sp.cosh,
  OpType.TANH: sp.tanh,
  OpType.SQRT: sp.sqrt,
  OpType.ABS: sp.Abs,
  OpType.EXP: sp.exp,
  OpType.LN: sp.log,
}


def format_number(value: float) -> str:
  """Positional (never scientific) notation that parses back to the same float"""
  return np.format_float_positional(value, trim='-')


class Term(ABC):
  """Base term class. Terms are immutable once built."""

  __slots__ = ('_hash_cache', '_size_cache')

  def __init__(self):
    self._hash_cache: Optional[int] = None
    self._size_cache: Optional[int] = None

  @abstractmethod
  def evaluate(self, t: float) -> float:
    pass

  @abstractmethod
  def evaluate_array(self, ts: np.ndarray) -> np.ndarray:
    pass

  @abstractmethod
  def to_string(self) -> str:
    pass

  @abstractmethod
  def to_sympy(self, symbol=None) -> sp.Expr:
    pass

  @abstractmethod
  def children(self) -> Tuple['Term', ...]:
    pass

  @property
  @abstractmethod
  def node_type(self) -> NodeType:
    pass

  @abstractmethod
  def _key(self) -> tuple:
    pass

  def size(self) -> int:
    """Node count"""
    if self._size_cache is None:
      count = 0
      stack = [self]
      while stack:
        current = stack.pop()
        count += 1
        stack.extend(current.children())
      self._size_cache = count
    return self._size_cache

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"{type(self).__name__}({self.to_string()!r})"

  def __eq__(self, other) -> bool:
    if not isinstance(other, Term):
      return NotImplemented
    return self._key() == other._key()

  def __hash__(self) -> int:
    if self._hash_cache is None:
      self._hash_cache = hash(self._key())
    return self._hash_cache


def _check_term(value, role: str) -> 'Term':
  if not isinstance(value, Term):
    raise TypeError(f"{role} must be a Term, got {type(value).__name__}")
  return value


def _parameter_symbol(term: Term) -> sp.Symbol:
  """Symbol named after the first parameter found in the tree, 't' if there is none"""
  stack = [term]
  while stack:
    current = stack.pop()
    if isinstance(current, ParameterTerm):
      return sp.Symbol(current.name)
    stack.extend(current.children())
  return sp.Symbol('t')


class ParameterTerm(Term):
  """The free parameter; evaluates to whatever value is passed in"""

  __slots__ = ('_name',)

  def __init__(self, name: str = 't'):
    super().__init__()
    self._name = name

  @property
  def name(self) -> str:
    return self._name

  @property
  def node_type(self) -> NodeType:
    return NodeType.PARAMETER

  def evaluate(self, t: float) -> float:
    return float(t)

  def evaluate_array(self, ts: np.ndarray) -> np.ndarray:
    return ts.copy()

  def to_string(self) -> str:
    return self._name

  def to_sympy(self, symbol=None):
    return sp.Symbol(self._name) if symbol is None else symbol

  def children(self):
    return ()

  def _key(self):
    return (NodeType.PARAMETER,)


class ConstantTerm(Term):
  """Returns the same value no matter what parameter is passed in"""

  __slots__ = ('_value',)

  def __init__(self, value: float):
    super().__init__()
    self._value = float(value)

  @property
  def value(self) -> float:
    return self._value

  @property
  def node_type(self) -> NodeType:
    return NodeType.CONSTANT

  def evaluate(self, t: float) -> float:
    return self._value

  def evaluate_array(self, ts: np.ndarray) -> np.ndarray:
    return np.full(ts.shape, self._value, dtype=np.float64)

  def to_string(self) -> str:
    text = format_number(self._value)
    return f"({text})" if self._value < 0 else text

  def to_sympy(self, symbol=None):
    if self._value.is_integer():
      return sp.Integer(int(self._value))
    return sp.Float(self._value)

  def children(self):
    return ()

  def _key(self):
    return (NodeType.CONSTANT, self._value)


class BinaryOpTerm(Term):
  __slots__ = ('_operator', '_left', '_right')

  def __init__(self, operator: Union[OpType, str], left: Term, right: Term):
    super().__init__()
    if isinstance(operator, str):
      if operator not in BINARY_OP_MAP:
        raise ValueError(f"Unknown binary operator: {operator!r}")
      operator = BINARY_OP_MAP[operator]
    elif operator not in BINARY_SYMBOLS:
      raise ValueError(f"{operator!r} is not a binary operator")
    self._operator = OpType(operator)
    self._left = _check_term(left, 'left')
    self._right = _check_term(right, 'right')

  @property
  def operator(self) -> OpType:
    return self._operator

  @property
  def symbol(self) -> str:
    return BINARY_SYMBOLS[self._operator]

  @property
  def left(self) -> Term:
    return self._left

  @property
  def right(self) -> Term:
    return self._right

  @property
  def node_type(self) -> NodeType:
    return NodeType.BINARY_OP

  def evaluate(self, t: float) -> float:
    return evaluate_binary_op(self._left.evaluate(t), self._right.evaluate(t), self._operator)

  def evaluate_array(self, ts: np.ndarray) -> np.ndarray:
    return evaluate_binary_op(self._left.evaluate_array(ts), self._right.evaluate_array(ts), self._operator)

  def to_string(self) -> str:
    return f"({self._left.to_string()} {self.symbol} {self._right.to_string()})"

  def to_sympy(self, symbol=None):
    left = self._left.to_sympy(symbol)
    right = self._right.to_sympy(symbol)
    if self._operator == OpType.ADD:
      return sp.Add(left, right)
    elif self._operator == OpType.SUB:
      return sp.Add(left, sp.Mul(-1, right))
    elif self._operator == OpType.MUL:
      return sp.Mul(left, right)
    elif self._operator == OpType.DIV:
      return sp.Mul(left, sp.Pow(right, -1))
    return sp.Pow(left, right)

  def children(self):
    return (self._left, self._right)

  def _key(self):
    return (NodeType.BINARY_OP, self._operator, self._left._key(), self._right._key())


class UnaryFuncTerm(Term):
  """Applies one of the builtin functions (or negation) to a subterm"""

  __slots__ = ('_operator', '_operand')

  def __init__(self, operator: Union[OpType, str], operand: Term):
    super().__init__()
    if isinstance(operator, str):
      if operator not in UNARY_OP_MAP:
        raise ValueError(f"Unknown unary function: {operator!r}")
      operator = UNARY_OP_MAP[operator]
    elif operator not in UNARY_NAMES:
      raise ValueError(f"{operator!r} is not a unary function")
    self._operator = OpType(operator)
    self._operand = _check_term(operand, 'operand')

  @property
  def operator(self) -> OpType:
    return self._operator

  @property
  def name(self) -> str:
    return UNARY_NAMES[self._operator]

  @property
  def operand(self) -> Term:
    return self._operand

  @property
  def node_type(self) -> NodeType:
    return NodeType.UNARY_OP

  def evaluate(self, t: float) -> float:
    return evaluate_unary_op(self._operand.evaluate(t), self._operator)

  def evaluate_array(self, ts: np.ndarray) -> np.ndarray:
    return evaluate_unary_op(self._operand.evaluate_array(ts), self._operator)

  def to_string(self) -> str:
    if self._operator == OpType.NEG:
      return f"(-{self._operand.to_string()})"
    return f"{self.name}({self._operand.to_string()})"

  def to_sympy(self, symbol=None):
    operand = self._operand.to_sympy(symbol)
    if self._operator == OpType.NEG:
      return -operand
    if self._operator == OpType.CBRT:
      return sp.sign(operand) * sp.Abs(operand)**sp.Rational(1, 3)
    return SYMPY_FUNCTIONS[self._operator](operand)

  def children(self):
    return (self._operand,)

  def _key(self):
    return (NodeType.UNARY_OP, self._operator, self._operand._key())


class FunctionTerm(Term):
  """Applies a user supplied float -> float callable to a subterm"""

  __slots__ = ('_name', '_function', '_operand')

  def __init__(self, name: str, function: Callable[[float], float], operand: Term):
    super().__init__()
    if not callable(function):
      raise TypeError(f"function for {name!r} must be callable")
    self._name = name
    self._function = function
    self._operand = _check_term(operand, 'operand')

  @property
  def name(self) -> str:
    return self._name

  @property
  def function(self) -> Callable[[float], float]:
    return self._function

  @property
  def operand(self) -> Term:
    return self._operand

  @property
  def node_type(self) -> NodeType:
    return NodeType.FUNCTION

  def _apply(self, value: float) -> float:
    try:
      with np.errstate(all='ignore'):
        return float(self._function(value))
    except DOMAIN_ERRORS:
      return float('nan')

  def evaluate(self, t: float) -> float:
    return self._apply(self._operand.evaluate(t))

  def evaluate_array(self, ts: np.ndarray) -> np.ndarray:
    values = self._operand.evaluate_array(ts)
    out = np.fromiter((self._apply(v) for v in values.ravel()), dtype=np.float64, count=values.size)
    return out.reshape(values.shape)

  def to_string(self) -> str:
    return f"{self._name}({self._operand.to_string()})"

  def to_sympy(self, symbol=None):
    return sp.Function(self._name)(self._operand.to_sympy(symbol))

  def children(self):
    return (self._operand,)

  def _key(self):
    return (NodeType.FUNCTION, self._name, id(self._function), self._operand._key())


class PiecewiseTerm(Term):
  """
  Splits the number line into intervals during which different terms apply.

  Each part is a (term, after) pair. Parts are scanned in order and the term
  of the last part whose threshold has been reached is used; the first part
  applies below every threshold. A looping term first reduces any t larger
  than the cycle to its remainder with respect to the cycle.
  """

  __slots__ = ('_parts', '_cycle')

  def __init__(self, parts: Sequence[Tuple[Term, float]] = (), cycle: Optional[float] = None):
    super().__init__()
    self._parts = tuple((_check_term(term, 'piece'), float(after)) for term, after in parts)
    self._cycle = None if cycle is None else float(cycle)

  @classmethod
  def looping(cls, cycle: float, parts: Sequence[Tuple[Term, float]] = ()) -> 'PiecewiseTerm':
    return cls(parts, cycle=cycle)

  def add_part(self, term: Term, after: float) -> 'PiecewiseTerm':
    """Returns a new piecewise term with one more part appended"""
    return PiecewiseTerm(self._parts + ((term, after),), cycle=self._cycle)

  @property
  def parts(self) -> Tuple[Tuple[Term, float], ...]:
    return self._parts

  @property
  def cycle(self) -> Optional[float]:
    return self._cycle

  @property
  def node_type(self) -> NodeType:
    return NodeType.PIECEWISE

  def evaluate(self, t: float) -> float:
    if not self._parts:
      return 0.0

    t = float(t)
    if self._cycle is not None:
      t = evaluate_cycle(t, self._cycle)

    current = self._parts[0][0]
    for term, after in self._parts[1:]:
      if t >= after:
        current = term
      else:
        break
    return current.evaluate(t)

  def evaluate_array(self, ts: np.ndarray) -> np.ndarray:
    if not self._parts:
      return np.zeros(ts.shape, dtype=np.float64)

    with np.errstate(all='ignore'):
      if self._cycle is not None:
        ts = np.where(ts > self._cycle, np.fmod(ts, self._cycle), ts)

    # Number of leading thresholds (after the first part) already reached
    thresholds = np.array([after for _, after in self._parts[1:]], dtype=np.float64)
    reached = ts[..., np.newaxis] >= thresholds
    index = np.cumprod(reached, axis=-1).sum(axis=-1)

    out = np.empty(ts.shape, dtype=np.float64)
    for i, (term, _) in enumerate(self._parts):
      mask = index == i
      if np.any(mask):
        out[mask] = term.evaluate_array(ts)[mask]
    return out

  def to_string(self) -> str:
    prefix = 'p' if self._cycle is None else f"p[{format_number(self._cycle)}]"
    pieces = '|'.join(f"{term.to_string()}>{format_number(after)}" for term, after in self._parts)
    # "psin(t)>0" would read as a call of psin
    if self._cycle is None and pieces[:1].isalpha():
      prefix += ' '
    return prefix + pieces

  def to_sympy(self, symbol=None):
    if not self._parts:
      return sp.Integer(0)

    s = _parameter_symbol(self) if symbol is None else symbol
    if self._cycle is not None:
      cycle = sp.Float(self._cycle)
      s = sp.Piecewise((sp.Mod(s, cycle), s > cycle), (s, True))

    # Largest k with every threshold of parts 1..k reached wins
    conditions = []
    for k in range(len(self._parts) - 1, 0, -1):
      reached = sp.And(*[s >= sp.Float(after) for _, after in self._parts[1:k + 1]])
      conditions.append((self._parts[k][0].to_sympy(s), reached))
    conditions.append((self._parts[0][0].to_sympy(s), True))
    return sp.Piecewise(*conditions)

  def children(self):
    return tuple(term for term, _ in self._parts)

  def _key(self):
    return (NodeType.PIECEWISE, self._cycle, tuple((term._key(), after) for term, after in self._parts))
