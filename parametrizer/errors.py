"""
Parse errors raised while turning an expression string into a term tree.

Every failure is reported when a Parametrizer is constructed; evaluation
never raises. Each error class carries a `kind` so callers may branch either
on the exception class or on the ErrorKind value.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    INVALID_TOKEN = "invalid_token"
    UNKNOWN_FUNCTION = "unknown_function"
    UNMATCHED_PARENTHESIS = "unmatched_parenthesis"
    UNEXPECTED_TOKEN = "unexpected_token"
    EMPTY_EXPRESSION = "empty_expression"
    NESTING_TOO_DEEP = "nesting_too_deep"


class ParseError(Exception):
    """Base class: the expression which failed plus the reason for failure"""

    kind: Optional[ErrorKind] = None

    def __init__(self, reason: str, expression: str = "", position: Optional[int] = None):
        self.reason = reason
        self.expression = expression
        self.position = position
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"Parametrizer failed to parse string: {self.expression}, with failure reason: {self.reason}"
        if self.position is not None:
            message += f" (at position {self.position})"
        return message

    def with_expression(self, expression: str) -> 'ParseError':
        """Attach the source string once it is known (tokens do not carry it)"""
        self.expression = expression
        self.args = (self._format(),)
        return self


class InvalidToken(ParseError):
    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, text: str, expression: str = "", position: Optional[int] = None):
        self.text = text
        super().__init__(f"Invalid token {text!r}", expression, position)


class UnknownFunction(ParseError):
    kind = ErrorKind.UNKNOWN_FUNCTION

    def __init__(self, name: str, expression: str = "", position: Optional[int] = None):
        self.name = name
        super().__init__(f"Unknown function {name!r}", expression, position)


class UnmatchedParenthesis(ParseError):
    kind = ErrorKind.UNMATCHED_PARENTHESIS

    def __init__(self, expression: str = "", position: Optional[int] = None):
        super().__init__("Unmatched parenthesis", expression, position)


class UnexpectedToken(ParseError):
    kind = ErrorKind.UNEXPECTED_TOKEN

    def __init__(self, token: str, expression: str = "", position: Optional[int] = None):
        self.token = token
        super().__init__(f"Unexpected token {token}", expression, position)


class EmptyExpression(ParseError):
    kind = ErrorKind.EMPTY_EXPRESSION

    def __init__(self, expression: str = ""):
        super().__init__("Empty expression", expression, None)


class NestingTooDeep(ParseError):
    kind = ErrorKind.NESTING_TOO_DEEP

    def __init__(self, max_depth: int, expression: str = "", position: Optional[int] = None):
        self.max_depth = max_depth
        super().__init__(f"Expression nested deeper than {max_depth} levels", expression, position)
