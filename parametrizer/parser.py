"""
Recursive-descent parser building a term tree from a token list.

Precedence, lowest to highest binding:

    expr      := term (('+' | '-') term)*
    term      := power (('*' | '/') power)*
    power     := unary ('^' power)?            right-associative
    unary     := '-' unary | atom
    atom      := NUMBER | PARAMETER | IDENTIFIER '(' expr ')' | '(' expr ')'

    piecewise := 'p' ('[' NUMBER ']')? piece ('|' piece)*
    piece     := expr '>' '-'? NUMBER

Operators must be explicit: "2t" and "2(t+1)" are rejected, not read as
products. Division by zero is not a parse error; it evaluates to inf/nan.
"""

from contextlib import contextmanager
from typing import Dict, List, Optional, Sequence

from .config import ParserConfig, DEFAULT_CONFIG
from .errors import (
    ParseError, EmptyExpression, UnexpectedToken, UnknownFunction,
    UnmatchedParenthesis, NestingTooDeep
)
from .functions import ParametrizerFunction
from .logging_system import get_logger, log_debug
from .term import (
    Term, ConstantTerm, ParameterTerm, BinaryOpTerm, UnaryFuncTerm,
    FunctionTerm, PiecewiseTerm, OpType, DEFAULT_FUNCTION_NAMES,
    calculate_tree_depth, get_all_nodes
)
from .tokenizer import Token, TokenType, tokenize

END_OF_INPUT = "end of input"

# Operator chains such as "t+t+...+t" deepen the tree without nesting; the
# finished tree may be this many times deeper than max_depth
CHAIN_DEPTH_FACTOR = 8

ADDITIVE = {TokenType.PLUS: OpType.ADD, TokenType.MINUS: OpType.SUB}
MULTIPLICATIVE = {TokenType.STAR: OpType.MUL, TokenType.SLASH: OpType.DIV}


class Parser:
    """Single-use parser over one token list"""

    def __init__(self, tokens: Sequence[Token],
                 functions: Optional[Dict[str, ParametrizerFunction]] = None,
                 config: ParserConfig = DEFAULT_CONFIG,
                 expression: str = ""):
        self.tokens = list(tokens)
        self.functions = functions or {}
        self.config = config
        self.expression = expression
        self.pos = 0
        self.depth = 0
        self.open_parens: List[Token] = []

    # Token stream helpers

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def consume(self) -> Optional[Token]:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def _unexpected(self, token: Optional[Token]) -> ParseError:
        if token is None:
            if self.open_parens:
                return UnmatchedParenthesis(self.expression, self.open_parens[-1].position)
            return UnexpectedToken(END_OF_INPUT, self.expression, len(self.expression))
        return UnexpectedToken(token.describe(), self.expression, token.position)

    def expect(self, token_type: TokenType) -> Token:
        token = self.consume()
        if token is None or token.type != token_type:
            raise self._unexpected(token)
        return token

    @contextmanager
    def nested(self, token: Optional[Token]):
        self.depth += 1
        if self.depth > self.config.max_depth:
            raise NestingTooDeep(self.config.max_depth, self.expression,
                                 token.position if token is not None else None)
        try:
            yield
        finally:
            self.depth -= 1

    # Grammar

    def parse(self) -> Term:
        if not self.tokens:
            raise EmptyExpression(self.expression)

        if self.tokens[0].type == TokenType.PIECEWISE:
            root = self.piecewise()
        else:
            root = self.expr()

        trailing = self.peek()
        if trailing is not None:
            raise UnexpectedToken(trailing.describe(), self.expression, trailing.position)

        limit = self.config.max_depth * CHAIN_DEPTH_FACTOR
        if calculate_tree_depth(root) > limit:
            raise NestingTooDeep(limit, self.expression)
        return root

    def expr(self) -> Term:
        node = self.term()
        while self.peek() is not None and self.peek().type in ADDITIVE:
            op = ADDITIVE[self.consume().type]
            node = BinaryOpTerm(op, node, self.term())
        return node

    def term(self) -> Term:
        node = self.power()
        while self.peek() is not None and self.peek().type in MULTIPLICATIVE:
            op = MULTIPLICATIVE[self.consume().type]
            node = BinaryOpTerm(op, node, self.power())
        return node

    def power(self) -> Term:
        base = self.unary()
        token = self.peek()
        if token is not None and token.type == TokenType.CARET:
            self.consume()
            with self.nested(token):
                exponent = self.power()
            return BinaryOpTerm(OpType.POW, base, exponent)
        return base

    def unary(self) -> Term:
        token = self.peek()
        if token is not None and token.type == TokenType.MINUS:
            self.consume()
            with self.nested(token):
                operand = self.unary()
            return UnaryFuncTerm(OpType.NEG, operand)
        return self.atom()

    def atom(self) -> Term:
        token = self.consume()
        if token is None:
            raise self._unexpected(None)

        if token.type == TokenType.NUMBER:
            return ConstantTerm(token.value)

        if token.type == TokenType.PARAMETER:
            return ParameterTerm(self.config.parameter)

        if token.type == TokenType.IDENTIFIER:
            return self.call(token)

        if token.type == TokenType.LPAREN:
            return self.group(token)

        raise self._unexpected(token)

    def call(self, name_token: Token) -> Term:
        name = name_token.value
        user_function = self.functions.get(name)
        if user_function is None and not (self.config.include_default_functions
                                          and name in DEFAULT_FUNCTION_NAMES):
            raise UnknownFunction(name, self.expression, name_token.position)

        argument = self.group(self.expect(TokenType.LPAREN))
        if user_function is not None:
            return FunctionTerm(name, user_function.function, argument)
        return UnaryFuncTerm(name, argument)

    def group(self, open_token: Token) -> Term:
        """Everything after an opening parenthesis up to and including its match"""
        self.open_parens.append(open_token)
        with self.nested(open_token):
            node = self.expr()
        token = self.peek()
        if token is None:
            raise UnmatchedParenthesis(self.expression, open_token.position)
        if token.type != TokenType.RPAREN:
            raise self._unexpected(token)
        self.consume()
        self.open_parens.pop()
        return node

    def signed_number(self) -> float:
        sign = 1.0
        token = self.peek()
        if token is not None and token.type == TokenType.MINUS:
            self.consume()
            sign = -1.0
        return sign * self.expect(TokenType.NUMBER).value

    def piecewise(self) -> PiecewiseTerm:
        self.expect(TokenType.PIECEWISE)

        cycle = None
        token = self.peek()
        if token is not None and token.type == TokenType.LBRACKET:
            self.consume()
            cycle = self.expect(TokenType.NUMBER).value
            self.expect(TokenType.RBRACKET)

        parts = []
        while True:
            piece = self.expr()
            self.expect(TokenType.GREATER)
            parts.append((piece, self.signed_number()))

            token = self.peek()
            if token is None or token.type != TokenType.PIPE:
                break
            self.consume()

        return PiecewiseTerm(parts, cycle=cycle)


def parse(tokens: Sequence[Token],
          functions: Optional[Dict[str, ParametrizerFunction]] = None,
          config: ParserConfig = DEFAULT_CONFIG,
          expression: str = "") -> Term:
    """Build a term tree from tokens; raises a ParseError subclass and never returns a partial tree"""
    root = Parser(tokens, functions, config, expression).parse()
    if get_logger().debug_enabled():
        log_debug(f"Parsed {expression!r}: {len(get_all_nodes(root))} nodes, depth {calculate_tree_depth(root)}")
    return root


def parse_string(expression: str,
                 functions: Optional[Dict[str, ParametrizerFunction]] = None,
                 config: ParserConfig = DEFAULT_CONFIG) -> Term:
    """Tokenize then parse an already normalized string"""
    if not expression.strip():
        raise EmptyExpression(expression)
    return parse(tokenize(expression, config.parameter), functions, config, expression)
