"""
Error handling for the Ember parser.

Parsing is fail-fast: the first grammar violation raises ParseError and
the whole parse is abandoned. Each error carries a kind, an error code,
the offending token and its location.

Author: xwest
"""

from enum import Enum
from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic


class ParseErrorKind(Enum):
    """Categories of fatal parse failures."""
    UNEXPECTED_TOKEN = "P001"
    UNTERMINATED_CONSTRUCT = "P002"
    MISSING_IDENTIFIER = "P003"
    INVALID_OPERATOR = "P004"
    INVALID_PARAMETER = "P005"
    NESTING_TOO_DEEP = "P006"

    @property
    def code(self) -> str:
        return self.value


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        kind: ParseErrorKind = ParseErrorKind.UNEXPECTED_TOKEN,
        token: Optional[Token] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=kind.code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


MISSING_TOKEN_SUGGESTIONS = {
    TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
    TokenType.LEFT_PAREN: ["Add an opening parenthesis '('"],
    TokenType.COLON: ["Add a colon ':' before the block"],
    TokenType.NEWLINE: ["Start the block body on a new line"],
    TokenType.INDENT: ["Indent the block body"],
}


def describe(token_type: Union[TokenType, str]) -> str:
    return token_type.name if isinstance(token_type, TokenType) else token_type


def create_unexpected_token_error(expected: Union[TokenType, str], found: Token,
                                  description: Optional[str] = None) -> ParseError:
    """
    Create an error for a token that does not fit the grammar here.

    Hitting EOF is reported as an unterminated construct instead.
    """
    expected_str = description or describe(expected)
    suggestions = MISSING_TOKEN_SUGGESTIONS.get(expected) if isinstance(expected, TokenType) else None

    if found.type == TokenType.EOF:
        return create_unterminated_construct_error(expected_str, found, suggestions)

    return ParseError(
        message=f"Expected {expected_str}, found {found.type.name} {found.lexeme!r}",
        location=found.location,
        kind=ParseErrorKind.UNEXPECTED_TOKEN,
        token=found,
        help_text=f"The parser expected to see {expected_str} at this position.",
        suggestions=suggestions
    )


def create_unterminated_construct_error(expected: str, found: Token,
                                        suggestions: Optional[List[str]] = None) -> ParseError:
    """Create an error for input that ended inside an open construct."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=found.location,
        kind=ParseErrorKind.UNTERMINATED_CONSTRUCT,
        token=found,
        help_text=f"The parser reached the end of the input while expecting {expected}.",
        suggestions=suggestions
    )


def create_missing_identifier_error(keyword: str, found: Token) -> ParseError:
    """Create an error for a missing name after a keyword."""
    return ParseError(
        message=f"Expected a name after '{keyword}', found {found.type.name} {found.lexeme!r}",
        location=found.location,
        kind=ParseErrorKind.MISSING_IDENTIFIER,
        token=found,
        help_text=f"'{keyword}' must be followed by an identifier."
    )


def create_invalid_operator_error(found: Token) -> ParseError:
    """Create an error for an operator token with no AST operator."""
    return ParseError(
        message=f"Invalid operator {found.lexeme!r}",
        location=found.location,
        kind=ParseErrorKind.INVALID_OPERATOR,
        token=found
    )


def create_invalid_parameter_error(found: Token) -> ParseError:
    """Create an error for a bad token inside a parameter list."""
    if found.type == TokenType.EOF:
        return create_unterminated_construct_error("')' to close the parameter list", found,
                                                   MISSING_TOKEN_SUGGESTIONS[TokenType.RIGHT_PAREN])

    return ParseError(
        message=f"Invalid token in parameter list: {found.type.name} {found.lexeme!r}",
        location=found.location,
        kind=ParseErrorKind.INVALID_PARAMETER,
        token=found,
        help_text="Parameters are identifiers separated by commas.",
    )


def create_nesting_too_deep_error(found: Token, limit: int) -> ParseError:
    """Create an error for input nested deeper than the parser allows."""
    return ParseError(
        message=f"Nesting too deep at {found.type.name} {found.lexeme!r}",
        location=found.location,
        kind=ParseErrorKind.NESTING_TOO_DEEP,
        token=found,
        help_text=f"Expressions and blocks may be nested at most {limit} levels deep.",
        suggestions=["Split the expression into smaller assignments"]
    )
