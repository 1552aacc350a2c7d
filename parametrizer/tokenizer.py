"""
Tokenizer: converts an expression string into a flat list of tokens.

Numbers are integer or decimal literals, the parameter symbol is a name of
its own, and any other name must be followed by "(" to be a function call.
A leading "p" (alone, or directly followed by the digits or the parameter
that start the first piece) marks a piecewise definition.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .config import PIECEWISE_MARKER
from .errors import InvalidToken


class TokenType(Enum):
    NUMBER = "number"
    PARAMETER = "parameter"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    CARET = "^"
    LPAREN = "("
    RPAREN = ")"
    IDENTIFIER = "identifier"
    # Piecewise syntax
    PIECEWISE = "piecewise"
    PIPE = "|"
    GREATER = ">"
    LBRACKET = "["
    RBRACKET = "]"


SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '^': TokenType.CARET,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '|': TokenType.PIPE,
    '>': TokenType.GREATER,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
}

NUMBER_CHARS = frozenset('0123456789.')


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Union[float, str, None] = None
    position: int = 0
    source: Optional[str] = None

    def describe(self) -> str:
        return repr(self.text)

    @property
    def text(self) -> str:
        if self.type == TokenType.NUMBER:
            return self.source if self.source is not None else str(self.value)
        if self.type in (TokenType.PARAMETER, TokenType.IDENTIFIER):
            return self.value
        if self.type == TokenType.PIECEWISE:
            return PIECEWISE_MARKER
        return self.type.value


def _is_name_start(char: str) -> bool:
    return char.isascii() and (char.isalpha() or char == '_')


def _is_name_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == '_')


def _is_piecewise_marker(name: str, followed_by_call: bool, parameter: str) -> bool:
    """
    "p", or "p" glued to the start of the first piece: its digits as in
    "p2*t>0" or the parameter as in "pt>0". "p2(t)" stays a call.
    """
    if name == PIECEWISE_MARKER:
        return True
    if name[0] != PIECEWISE_MARKER or followed_by_call:
        return False
    return name[1].isdigit() or name[1:] == parameter


def _next_non_space(text: str, pos: int) -> str:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return text[pos] if pos < len(text) else ''


def tokenize(text: str, parameter: str = 't') -> List[Token]:
    """
    Split `text` into tokens, skipping whitespace.

    Raises InvalidToken for an unrecognized character, a malformed number
    literal, or a name which is neither the parameter nor a function call.
    """
    tokens: List[Token] = []
    pos = 0
    length = len(text)

    while pos < length:
        char = text[pos]

        if char.isspace():
            pos += 1
            continue

        if char in NUMBER_CHARS:
            start = pos
            while pos < length and text[pos] in NUMBER_CHARS:
                pos += 1
            literal = text[start:pos]
            try:
                value = float(literal)
            except ValueError:
                raise InvalidToken(literal, text, start) from None
            tokens.append(Token(TokenType.NUMBER, value, start, literal))
            continue

        if _is_name_start(char):
            start = pos
            while pos < length and _is_name_char(text[pos]):
                pos += 1
            name = text[start:pos]
            followed_by_call = _next_non_space(text, pos) == '('

            if name == parameter:
                tokens.append(Token(TokenType.PARAMETER, name, start))
            elif not tokens and _is_piecewise_marker(name, followed_by_call, parameter):
                # "p2*t>0|..." : only the marker is consumed, the rest is the first piece
                tokens.append(Token(TokenType.PIECEWISE, PIECEWISE_MARKER, start))
                pos = start + 1
            elif followed_by_call:
                tokens.append(Token(TokenType.IDENTIFIER, name, start))
            else:
                raise InvalidToken(name, text, start)
            continue

        token_type = SINGLE_CHAR_TOKENS.get(char)
        if token_type is None:
            raise InvalidToken(char, text, pos)
        tokens.append(Token(token_type, char, pos))
        pos += 1

    return tokens
