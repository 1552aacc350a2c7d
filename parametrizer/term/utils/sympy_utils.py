import sympy as sp
from typing import Optional

from ..core.node import Term, ParameterTerm, ConstantTerm, BinaryOpTerm, UnaryFuncTerm
from ..core.operators import OpType

SYMPY_TO_OP = {
  sp.sin: OpType.SIN,
  sp.cos: OpType.COS,
  sp.tan: OpType.TAN,
  sp.asin: OpType.ASIN,
  sp.acos: OpType.ACOS,
  sp.atan: OpType.ATAN,
  sp.sinh: OpType.SINH,
  sp.cosh: OpType.COSH,
  sp.tanh: OpType.TANH,
  sp.exp: OpType.EXP,
  sp.log: OpType.LN,
  sp.Abs: OpType.ABS,
}


def to_sympy_expression(term: Term, symbol: Optional[sp.Symbol] = None) -> sp.Expr:
  """Export a term tree to SymPy; the parameter becomes `symbol` (default Symbol('t'))"""
  return term.to_sympy(symbol)


def term_from_sympy(expr, symbol: Optional[sp.Symbol] = None, parameter: str = 't') -> Term:
  """
  Convert a SymPy expression into a term tree.

  Numbers, the parameter symbol, Add, Mul, Pow and the builtin functions are
  supported; any other construct (a second free symbol, an unknown function)
  raises ValueError.
  """
  expr = sp.sympify(expr)
  if symbol is None:
    symbol = sp.Symbol(parameter)
  return _sympy_to_term(expr, symbol, parameter)


def _fold_cube_roots(args, symbol, parameter: str) -> list:
  """cbrt(a) exports as sign(a) * Abs(a)**(1/3); turn each such pair of factors back into one term"""
  args = list(args)
  for sign in [arg for arg in args if isinstance(arg, sp.sign)]:
    root = sp.Pow(sp.Abs(sign.args[0]), sp.Rational(1, 3))
    if root in args:
      args.remove(sign)
      args[args.index(root)] = UnaryFuncTerm(OpType.CBRT, _sympy_to_term(sign.args[0], symbol, parameter))
  return args


def _sympy_to_term(expr, symbol, parameter: str) -> Term:
  if expr.is_Symbol:
    if expr != symbol:
      raise ValueError(f"Unexpected free symbol {expr} (parameter is {symbol})")
    return ParameterTerm(parameter)

  if expr.is_number and not expr.free_symbols:
    value = complex(expr.evalf())
    if value.imag != 0:
      raise ValueError(f"Complex constant {expr} is not supported")
    return ConstantTerm(value.real)

  if isinstance(expr, sp.Add):
    args = [_sympy_to_term(arg, symbol, parameter) for arg in expr.args]
    result = args[0]
    for arg in args[1:]:
      result = BinaryOpTerm(OpType.ADD, result, arg)
    return result

  if isinstance(expr, sp.Mul):
    negate = False
    numerator = None
    denominator = None
    for arg in _fold_cube_roots(expr.args, symbol, parameter):
      if isinstance(arg, Term):
        numerator = arg if numerator is None else BinaryOpTerm(OpType.MUL, numerator, arg)
        continue
      if arg == -1:
        negate = not negate
        continue
      if isinstance(arg, sp.Pow) and arg.exp == -1:
        factor = _sympy_to_term(arg.base, symbol, parameter)
        denominator = factor if denominator is None else BinaryOpTerm(OpType.MUL, denominator, factor)
        continue
      factor = _sympy_to_term(arg, symbol, parameter)
      numerator = factor if numerator is None else BinaryOpTerm(OpType.MUL, numerator, factor)

    result = numerator if numerator is not None else ConstantTerm(1.0)
    if denominator is not None:
      result = BinaryOpTerm(OpType.DIV, result, denominator)
    if negate:
      result = UnaryFuncTerm(OpType.NEG, result)
    return result

  if isinstance(expr, sp.Pow):
    base = _sympy_to_term(expr.base, symbol, parameter)
    if expr.exp == sp.Rational(1, 2):
      return UnaryFuncTerm(OpType.SQRT, base)
    if expr.exp == -1:
      return BinaryOpTerm(OpType.DIV, ConstantTerm(1.0), base)
    return BinaryOpTerm(OpType.POW, base, _sympy_to_term(expr.exp, symbol, parameter))

  if expr.func in SYMPY_TO_OP and len(expr.args) == 1:
    return UnaryFuncTerm(SYMPY_TO_OP[expr.func], _sympy_to_term(expr.args[0], symbol, parameter))

  raise ValueError(f"Cannot convert SymPy expression {expr} ({type(expr).__name__}) to a term")
