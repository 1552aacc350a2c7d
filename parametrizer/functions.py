"""User-defined functions callable from expression strings."""

from typing import Callable, Dict, Iterable, Optional

from .config import IDENTIFIER_RE, PIECEWISE_MARKER
from .term.core.operators import DEFAULT_FUNCTION_NAMES


class ParametrizerFunction:
    """
    A float -> float function paired with the name it is called by.

    The identifier is case-folded, so ParametrizerFunction("Sin", math.sin)
    is called as sin(...); `shorthand` is the identifier followed by "(",
    which is how it appears in an expression.
    """

    __slots__ = ('_identifier', '_function')

    def __init__(self, identifier: str, function: Callable[[float], float]):
        name = identifier.lower()
        if not IDENTIFIER_RE.match(name):
            raise ValueError(f"Function identifier must be alphanumeric, got {identifier!r}")
        if name == PIECEWISE_MARKER:
            raise ValueError(f"{PIECEWISE_MARKER!r} is reserved for piecewise definitions")
        if not callable(function):
            raise TypeError(f"function for {identifier!r} must be callable")
        self._identifier = name
        self._function = function

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def shorthand(self) -> str:
        return f"{self._identifier}("

    @property
    def function(self) -> Callable[[float], float]:
        return self._function

    def __call__(self, value: float) -> float:
        return self._function(value)

    def __repr__(self) -> str:
        return f"ParametrizerFunction({self._identifier!r}, {self._function!r})"


def build_function_table(functions: Optional[Iterable[ParametrizerFunction]] = None) -> Dict[str, ParametrizerFunction]:
    """Map identifier -> user function; a later entry with the same identifier wins"""
    table = {}
    for entry in functions or ():
        if not isinstance(entry, ParametrizerFunction):
            raise TypeError(f"Expected ParametrizerFunction, got {type(entry).__name__}")
        table[entry.identifier] = entry
    return table


def overridden_defaults(table: Dict[str, ParametrizerFunction]):
    """User functions which shadow a builtin function of the same name"""
    return sorted(name for name in table if name in DEFAULT_FUNCTION_NAMES)
