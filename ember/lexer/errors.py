"""
Error handling for the Ember lexer.

The lexer is lenient by default: problems are recorded as warnings and
scanning continues. In strict mode the same problems raise LexerError.
Both carry a Diagnostic with the source location and an error code.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base class for diagnostics (errors, warnings)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        code = f"[{self.code}] " if self.code else ""
        result = f"{severity_prefix}: {code}{self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised by a strict lexer.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)

    def to_warning(self) -> "LexerWarning":
        """Downgrade to a warning for lenient lexing."""
        return LexerWarning(
            self.diagnostic.message,
            self.diagnostic.location,
            code=self.diagnostic.code,
            help_text=self.diagnostic.help_text,
            suggestions=self.diagnostic.suggestions
        )


class LexerWarning:
    """
    A lexer problem that did not stop scanning.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


ERROR_CODES = {
    "L001": "Unrecognized character",
    "L002": "Unterminated string literal",
    "L003": "Inconsistent dedent",
}


def create_unrecognized_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character the scanner has no rule for."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in Ember source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    suggestions = ["Use '!=' for not equal"] if char == "!" else None

    return LexerError(
        message=f"{ERROR_CODES['L001']}: {char!r}",
        location=location,
        code="L001",
        help_text=help_text,
        suggestions=suggestions
    )


def create_unterminated_string_error(quote: str, location: SourceLocation) -> LexerError:
    """Create an error for a string literal that runs to end of input."""
    return LexerError(
        message=ERROR_CODES["L002"],
        location=location,
        code="L002",
        help_text=f"String literals must be closed with a matching {quote} quote.",
        suggestions=[f"Add a closing {quote} quote"]
    )


def create_inconsistent_dedent_error(width: int, levels: List[int],
                                     location: SourceLocation) -> LexerError:
    """Create an error for a dedent that lands between two indentation levels."""
    return LexerError(
        message=f"{ERROR_CODES['L003']}: width {width} does not match any outer indentation level",
        location=location,
        code="L003",
        help_text=f"Open indentation levels are {levels}.",
        suggestions=["Align the line with an enclosing block"]
    )
