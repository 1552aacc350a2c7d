import numpy as np
import sympy as sp
from dataclasses import replace
from typing import Iterable, Optional, Union

from .config import ParserConfig, DEFAULT_CONFIG
from .errors import ParseError
from .functions import ParametrizerFunction, build_function_table, overridden_defaults
from .logging_system import get_logger, log_info, log_warning
from .parser import parse_string
from .term import Term


def normalize_expression(expression: str) -> str:
  """Case-fold and accept '\\' as division; whitespace is left for the tokenizer to skip"""
  return expression.lower().replace('\\', '/')


class Parametrizer:
  """
  Owns the root term of a parsed parametric function.

  Parsing happens once, at construction, and reports every problem as a
  ParseError subclass. Afterwards `evaluate` is total: undefined operations
  give nan or +/-inf instead of raising. Instances hold no mutable state and
  may be shared between threads.

  >>> Parametrizer("1+2*t*t").evaluate(3.0)
  19.0
  >>> Parametrizer("6 + T").evaluate(2)
  8.0
  """

  __slots__ = ('_term', '_expression')

  def __init__(self, expression: Union[str, Term],
               functions: Optional[Iterable[ParametrizerFunction]] = None,
               config: Optional[ParserConfig] = None):
    if isinstance(expression, Term):
      if functions is not None:
        raise TypeError("functions only apply when parsing a string")
      self._term = expression
      self._expression = expression.to_string()
      return
    if not isinstance(expression, str):
      raise TypeError(f"expression must be a str or Term, got {type(expression).__name__}")

    config = config or DEFAULT_CONFIG
    table = build_function_table(functions)
    if table:
      log_info(f"User functions: {', '.join(sorted(table))}")
    if config.include_default_functions:
      for name in overridden_defaults(table):
        log_warning(f"User function {name!r} overrides the builtin function of the same name")

    text = normalize_expression(expression) if config.normalize else expression
    try:
      self._term = parse_string(text, table, config)
    except ParseError as e:
      get_logger().parse_failure(expression, e)
      raise e.with_expression(expression)
    self._expression = expression

  @classmethod
  def new(cls, expression: str, config: Optional[ParserConfig] = None) -> 'Parametrizer':
    """Parse with the builtin functions after normalizing case and '\\'"""
    return cls(expression, config=config)

  @classmethod
  def new_functions(cls, expression: str, functions: Iterable[ParametrizerFunction],
                    config: Optional[ParserConfig] = None) -> 'Parametrizer':
    """Like `new`, with user functions added to (and overriding) the builtins"""
    return cls(expression, functions=functions, config=config)

  @classmethod
  def quick_new(cls, expression: str, functions: Iterable[ParametrizerFunction] = (),
                config: Optional[ParserConfig] = None) -> 'Parametrizer':
    """
    Skips normalization and knows only the given functions.

    The string must already be lowercase with '/' for division; "T" or an
    unlisted "sin(" is rejected.
    """
    config = replace(config or DEFAULT_CONFIG, normalize=False, include_default_functions=False)
    return cls(expression, functions=functions, config=config)

  @classmethod
  def from_term(cls, term: Term) -> 'Parametrizer':
    """Wrap a programmatically built term, skipping the string parser entirely"""
    if not isinstance(term, Term):
      raise TypeError(f"term must be a Term, got {type(term).__name__}")
    return cls(term)

  @property
  def term(self) -> Term:
    return self._term

  @property
  def expression(self) -> str:
    return self._expression

  def evaluate(self, t: float) -> float:
    return self._term.evaluate(float(t))

  __call__ = evaluate

  def evaluate_many(self, ts) -> np.ndarray:
    """Evaluate at every value of `ts`; element i equals evaluate(ts[i])"""
    values = np.atleast_1d(np.asarray(ts, dtype=np.float64))
    return self._term.evaluate_array(values)

  def to_sympy(self, symbol: Optional[sp.Symbol] = None) -> sp.Expr:
    return self._term.to_sympy(symbol)

  def __str__(self) -> str:
    return self._expression

  def __repr__(self) -> str:
    return f"Parametrizer({self._expression!r})"
