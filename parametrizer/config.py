"""Parser configuration."""

import re
from dataclasses import dataclass

from .term.core.operators import DEFAULT_FUNCTION_NAMES

IDENTIFIER_RE = re.compile(r"[a-z_][a-z0-9_]*\Z")

# Reserved as the marker which starts a piecewise definition
PIECEWISE_MARKER = 'p'


@dataclass(frozen=True)
class ParserConfig:
    """Options shared by the tokenizer, the parser and the Parametrizer constructors"""
    parameter: str = 't'
    normalize: bool = True
    max_depth: int = 64
    include_default_functions: bool = True

    def __post_init__(self):
        if not isinstance(self.parameter, str) or not IDENTIFIER_RE.match(self.parameter):
            raise ValueError(f"parameter must be a lowercase identifier, got {self.parameter!r}")
        if self.parameter in DEFAULT_FUNCTION_NAMES or self.parameter == PIECEWISE_MARKER:
            raise ValueError(f"parameter {self.parameter!r} clashes with a reserved name")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")


DEFAULT_CONFIG = ParserConfig()
