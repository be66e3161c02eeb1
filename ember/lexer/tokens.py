"""
Token definitions for the Ember lexer.

This module defines every token type the Ember scanner can produce:
- Structural tokens synthesized from line breaks and indentation
- Delimiters and operators (each operator has its own tag)
- Keywords (one tag per reserved word)
- Literal carriers (identifiers, numbers, strings, booleans, None)

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in Ember.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Structural Tokens
    # ========================================================================
    EOF = auto()                    # End of file
    NEWLINE = auto()                # \n or \r
    INDENT = auto()                 # Indentation increase
    DEDENT = auto()                 # Indentation decrease
    COMMENT = auto()                # # comment text

    # ========================================================================
    # Literals
    # ========================================================================
    IDENTIFIER = auto()             # variable_name
    INTEGER = auto()                # 42
    FLOAT = auto()                  # 3.14
    STRING = auto()                 # "hello", 'hello'
    BOOLEAN = auto()                # True, False
    NONE = auto()                   # None

    # ========================================================================
    # Keywords
    # ========================================================================
    DEF = auto()
    RETURN = auto()
    IF = auto()
    ELIF = auto()
    ELSE = auto()
    FOR = auto()
    WHILE = auto()
    BREAK = auto()
    CONTINUE = auto()
    PASS = auto()
    IMPORT = auto()
    FROM = auto()
    AS = auto()
    TRY = auto()
    EXCEPT = auto()
    FINALLY = auto()
    RAISE = auto()
    CLASS = auto()
    WITH = auto()
    YIELD = auto()
    GLOBAL = auto()
    LAMBDA = auto()
    ASYNC = auto()
    AWAIT = auto()

    # Word operators
    AND = auto()                    # and
    OR = auto()                     # or
    NOT = auto()                    # not
    IN = auto()                     # in
    IS = auto()                     # is

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    STAR = auto()                   # *
    SLASH = auto()                  # /
    DOUBLE_SLASH = auto()           # //
    PERCENT = auto()                # %
    DOUBLE_STAR = auto()            # **
    EQUALS = auto()                 # =
    DOUBLE_EQUALS = auto()          # ==
    NOT_EQUALS = auto()             # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    COMMA = auto()                  # ,
    COLON = auto()                  # :
    SEMICOLON = auto()              # ;
    DOT = auto()                    # .
    ARROW = auto()                  # ->
    ELLIPSIS = auto()               # ...


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and AST source spans.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Ember language.

    Contains the token type, lexeme (raw text), semantic value,
    and source location.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed value (int for INTEGER, bool for BOOLEAN, ...)
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_literal(self) -> bool:
        """Check if this token carries a literal value."""
        return self.type in LITERALS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a reserved word."""
        return self.type in KEYWORD_TYPES

    @property
    def is_operator(self) -> bool:
        """Check if this token is an operator or delimiter."""
        return self.type in OPERATOR_TYPES

    @property
    def is_structural(self) -> bool:
        """Check if this token is layout or a comment rather than code."""
        return self.type in STRUCTURAL


STRUCTURAL = frozenset({
    TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT, TokenType.EOF,
    TokenType.COMMENT,
})

LITERALS = frozenset({
    TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING,
    TokenType.BOOLEAN, TokenType.NONE,
})

# Reserved words. True/False/None map to their literal tags.
KEYWORDS = {
    "def": TokenType.DEF,
    "return": TokenType.RETURN,
    "if": TokenType.IF,
    "elif": TokenType.ELIF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "while": TokenType.WHILE,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "pass": TokenType.PASS,
    "import": TokenType.IMPORT,
    "from": TokenType.FROM,
    "as": TokenType.AS,
    "try": TokenType.TRY,
    "except": TokenType.EXCEPT,
    "finally": TokenType.FINALLY,
    "raise": TokenType.RAISE,
    "class": TokenType.CLASS,
    "with": TokenType.WITH,
    "yield": TokenType.YIELD,
    "global": TokenType.GLOBAL,
    "lambda": TokenType.LAMBDA,
    "async": TokenType.ASYNC,
    "await": TokenType.AWAIT,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
    "in": TokenType.IN,
    "is": TokenType.IS,
    "None": TokenType.NONE,
    "True": TokenType.BOOLEAN,
    "False": TokenType.BOOLEAN,
}

KEYWORD_TYPES = frozenset(KEYWORDS.values()) - LITERALS

OPERATORS = {
    # Three characters
    "...": TokenType.ELLIPSIS,

    # Two characters
    "->": TokenType.ARROW,
    "**": TokenType.DOUBLE_STAR,
    "//": TokenType.DOUBLE_SLASH,
    "==": TokenType.DOUBLE_EQUALS,
    "!=": TokenType.NOT_EQUALS,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,

    # Single character
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "=": TokenType.EQUALS,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
}

OPERATOR_TYPES = frozenset(OPERATORS.values())

# Longest operator first; the scanner tries each length in turn
OPERATOR_LENGTHS = sorted({len(op) for op in OPERATORS}, reverse=True)
