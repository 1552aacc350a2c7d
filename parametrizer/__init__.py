"""Parametrizer Package

Parses strings such as "1+2*t*t" or "sin(t*t + t - 1)" into term trees that
evaluate a single-parameter function at any float value.
"""

from .parametrizer import Parametrizer, normalize_expression
from .functions import ParametrizerFunction
from .config import ParserConfig
from .errors import (
  ErrorKind, ParseError, InvalidToken, UnknownFunction, UnmatchedParenthesis,
  UnexpectedToken, EmptyExpression, NestingTooDeep
)
from .tokenizer import Token, TokenType, tokenize
from .parser import Parser, parse
from .term import (
  Term, ParameterTerm, ConstantTerm, BinaryOpTerm, UnaryFuncTerm,
  FunctionTerm, PiecewiseTerm, OpType, term_from_sympy
)
from .logging_system import LogLevel, configure_logging, get_logger, set_log_level

__version__ = "0.1.0"
__all__ = [
  "Parametrizer", "normalize_expression", "ParametrizerFunction", "ParserConfig",
  "ErrorKind", "ParseError", "InvalidToken", "UnknownFunction", "UnmatchedParenthesis",
  "UnexpectedToken", "EmptyExpression", "NestingTooDeep",
  "Token", "TokenType", "tokenize", "Parser", "parse",
  "Term", "ParameterTerm", "ConstantTerm", "BinaryOpTerm", "UnaryFuncTerm",
  "FunctionTerm", "PiecewiseTerm", "OpType", "term_from_sympy",
  "LogLevel", "configure_logging", "get_logger", "set_log_level"
]
