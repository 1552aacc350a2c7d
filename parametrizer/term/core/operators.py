import numpy as np
import numba
from enum import IntEnum

class NodeType(IntEnum):
  PARAMETER = 0
  CONSTANT = 1
  BINARY_OP = 2
  UNARY_OP = 3
  FUNCTION = 4
  PIECEWISE = 5

class OpType(IntEnum):
  # Binary ops
  ADD = 0
  SUB = 1
  MUL = 2
  DIV = 3
  POW = 4
  # Unary ops
  SIN = 5
  COS = 6
  TAN = 7
  ASIN = 8
  ACOS = 9
  ATAN = 10
  SINH = 11
  COSH = 12
  TANH = 13
  SQRT = 14
  CBRT = 15
  ABS = 16
  NEG = 17
  EXP = 18
  LN = 19

# Mapping dictionaries
BINARY_OP_MAP = {'+': OpType.ADD, '-': OpType.SUB, '*': OpType.MUL, '/': OpType.DIV, '^': OpType.POW}
UNARY_OP_MAP = {
    'sin': OpType.SIN, 'cos': OpType.COS, 'tan': OpType.TAN,
    'asin': OpType.ASIN, 'acos': OpType.ACOS, 'atan': OpType.ATAN,
    'sinh': OpType.SINH, 'cosh': OpType.COSH, 'tanh': OpType.TANH,
    'sqrt': OpType.SQRT, 'cbrt': OpType.CBRT, 'abs': OpType.ABS,
    'exp': OpType.EXP, 'ln': OpType.LN, 'log': OpType.LN,
    'neg': OpType.NEG
}

BINARY_SYMBOLS = {op: symbol for symbol, op in BINARY_OP_MAP.items()}
# 'log' is only an alias on input; output always spells the natural log 'ln'
UNARY_NAMES = {op: name for name, op in UNARY_OP_MAP.items() if name != 'log'}

# Names a user can call as name(...); negation is written with a prefix '-'
DEFAULT_FUNCTION_NAMES = frozenset(name for name in UNARY_OP_MAP if name != 'neg')


# error_model='numpy' keeps x / 0.0 as inf/nan instead of ZeroDivisionError.
# No fastmath: nan and inf must propagate.
@numba.njit(cache=True, error_model='numpy')
def evaluate_binary_op(left_val, right_val, op_type):
  if op_type == OpType.ADD:
    return left_val + right_val
  elif op_type == OpType.SUB:
    return left_val - right_val
  elif op_type == OpType.MUL:
    return left_val * right_val
  elif op_type == OpType.DIV:
    return left_val / right_val
  elif op_type == OpType.POW:
    return np.power(left_val, right_val)
  return left_val * np.nan

@numba.njit(cache=True, error_model='numpy')
def evaluate_unary_op(operand_val, op_type):
  if op_type == OpType.SIN:
    return np.sin(operand_val)
  elif op_type == OpType.COS:
    return np.cos(operand_val)
  elif op_type == OpType.TAN:
    return np.tan(operand_val)
  elif op_type == OpType.ASIN:
    return np.arcsin(operand_val)
  elif op_type == OpType.ACOS:
    return np.arccos(operand_val)
  elif op_type == OpType.ATAN:
    return np.arctan(operand_val)
  elif op_type == OpType.SINH:
    return np.sinh(operand_val)
  elif op_type == OpType.COSH:
    return np.cosh(operand_val)
  elif op_type == OpType.TANH:
    return np.tanh(operand_val)
  elif op_type == OpType.SQRT:
    return np.sqrt(operand_val)
  elif op_type == OpType.CBRT:
    # Real cube root, sign preserved
    return np.sign(operand_val) * np.power(np.abs(operand_val), 1.0 / 3.0)
  elif op_type == OpType.ABS:
    return np.abs(operand_val)
  elif op_type == OpType.NEG:
    return -operand_val
  elif op_type == OpType.EXP:
    return np.exp(operand_val)
  elif op_type == OpType.LN:
    return np.log(operand_val)
  return operand_val * np.nan

@numba.njit(cache=True, error_model='numpy')
def evaluate_cycle(t, cycle):
  if t > cycle:
    return np.fmod(t, cycle)
  return t

