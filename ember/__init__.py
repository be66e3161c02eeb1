"""
Ember Front End

Lexer and parser for Ember, a small Python-like scripting language with
indentation-delimited blocks.

Architecture:
    ember/
    ├── lexer/           # Tokenization and indentation tracking
    ├── parser/          # Syntax analysis and AST generation
    └── cli.py           # Token and AST dumps from the command line

Author: xwest
License: MIT
"""

__version__ = "0.1.0-alpha"
__author__ = "xwest"
__email__ = "dev@ember-lang.org"
__license__ = "MIT"

from .lexer import Lexer, LexerConfig, tokenize
from .parser import Parser, parse, parse_string

__all__ = [
    # Core classes
    "Lexer",
    "LexerConfig",
    "Parser",

    # Pipeline functions
    "tokenize",
    "parse",
    "parse_string",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
