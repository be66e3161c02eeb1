"""
Ember Lexer Package

Turns Ember source text into a token stream, synthesizing NEWLINE,
INDENT and DEDENT tokens from line structure.

Key Features:
- Indentation tracking with a stack of open widths (tab = 4 spaces)
- Greedy multi-character operator matching
- Lenient scanning by default, strict mode on request
- Source location on every token

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, LexerConfig, clean_tokens, tokenize, tokenize_file
from .errors import LexerError, LexerWarning

__all__ = [
    "Lexer",
    "LexerConfig",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "LexerWarning",
    "clean_tokens",
    "tokenize",
    "tokenize_file",
]
