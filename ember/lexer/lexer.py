"""
Ember Lexer - turns source text into a token stream

Single left-to-right scan with one character of lookahead. Indentation
is measured at the start of every logical line and turned into INDENT /
DEDENT tokens against a stack of open widths, the way Python does it.

The raw scan keeps comments and may produce runs of newlines. The
clean_tokens pass normalizes that before the parser sees it.

xwest
"""

import logging
import string
from dataclasses import dataclass
from typing import List, Optional

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS, OPERATOR_LENGTHS
from .errors import (
    LexerError, LexerWarning, create_unrecognized_character_error,
    create_unterminated_string_error, create_inconsistent_dedent_error
)

logger = logging.getLogger(__name__)

# A tab always counts as four spaces
TAB_WIDTH = 4

DIGITS = frozenset(string.digits)
LINE_BREAKS = frozenset("\r\n")
INLINE_WHITESPACE = frozenset(" \t")


@dataclass(frozen=True)
class LexerConfig:
    """
    Options for a lexing pass.

    strict: raise LexerError on unrecognized characters, unterminated
        strings and misaligned dedents instead of recording a warning.
    keep_comments: let COMMENT tokens through clean_tokens.
    """
    strict: bool = False
    keep_comments: bool = False


class Lexer:
    """
    Ember lexical analyzer.

    One instance handles one pass over one source text. The indent stack
    starts at [0] and only grows by strictly larger widths.
    """

    def __init__(self, source: str, filename: str = "<string>",
                 config: Optional[LexerConfig] = None):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
            config: Lexing options, lenient by default
        """
        self.source = source
        self.filename = filename
        self.config = config or LexerConfig()
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.warnings: List[LexerWarning] = []
        self.indent_stack: List[int] = [0]
        self.at_line_start = True

    def tokenize(self) -> List[Token]:
        """
        Scan the entire source.

        Returns:
            Raw list of tokens, terminated by exactly one EOF token

        Raises:
            LexerError: Only in strict mode
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []
        self.warnings = []
        self.indent_stack = [0]
        self.at_line_start = True

        while self.pos < len(self.source):
            if self.at_line_start:
                self.at_line_start = False
                self._handle_indentation()
                continue

            token = self._next_token()
            if token:
                self.tokens.append(token)

        self.tokens.append(Token(TokenType.EOF, "", None, self._location()))

        logger.debug(f"{self.filename}: scanned {len(self.tokens)} tokens, "
                     f"{len(self.warnings)} warnings")
        return self.tokens

    def _next_token(self) -> Optional[Token]:
        """Scan one token, or consume input that produces none."""
        location = self._location()
        current_char = self.source[self.pos]

        # Whitespace between tokens
        if current_char in INLINE_WHITESPACE:
            while self._current() in INLINE_WHITESPACE:
                self._advance()
            return None

        if current_char in LINE_BREAKS:
            self._advance()
            self.at_line_start = True
            return Token(TokenType.NEWLINE, current_char, None, location)

        if current_char in ("'", '"'):
            return self._tokenize_string(location)

        if current_char == "#":
            return self._tokenize_comment(location)

        if current_char in DIGITS:
            return self._tokenize_number(location)

        if current_char.isalpha() or current_char == "_":
            return self._tokenize_identifier_or_keyword(location)

        # Operators and punctuation, longest match first
        for op_len in OPERATOR_LENGTHS:
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                self._advance_by(op_len)
                return Token(OPERATORS[potential_op], potential_op, None, location)

        self._report(create_unrecognized_character_error(current_char, location))
        self._advance()
        return None

    def _handle_indentation(self):
        """Measure leading whitespace and emit INDENT/DEDENT tokens."""
        location = self._location()
        start_pos = self.pos
        width = 0

        while self._current() in INLINE_WHITESPACE:
            width += TAB_WIDTH if self._current() == "\t" else 1
            self._advance()

        # Blank and comment-only lines do not open or close blocks
        if self.pos >= len(self.source) or self._current() in LINE_BREAKS or self._current() == "#":
            return

        whitespace = self.source[start_pos:self.pos]
        current_level = self.indent_stack[-1]

        if width > current_level:
            self.indent_stack.append(width)
            self.tokens.append(Token(TokenType.INDENT, whitespace, width, location))
        elif width < current_level:
            while self.indent_stack[-1] > width:
                self.indent_stack.pop()
                self.tokens.append(Token(TokenType.DEDENT, "", width, location))

            if self.indent_stack[-1] != width:
                self._report(create_inconsistent_dedent_error(
                    width, list(self.indent_stack), location
                ))

    def _tokenize_string(self, location: SourceLocation) -> Token:
        """Scan a quoted string. There are no escape sequences."""
        start_pos = self.pos
        quote = self.source[self.pos]
        self._advance()  # Skip opening quote

        value_start = self.pos
        while self.pos < len(self.source) and self.source[self.pos] != quote:
            self._advance()
        value = self.source[value_start:self.pos]

        if self.pos >= len(self.source):
            self._report(create_unterminated_string_error(quote, location))
        else:
            self._advance()  # Skip closing quote

        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.STRING, lexeme, value, location)

    def _tokenize_comment(self, location: SourceLocation) -> Token:
        """Scan a comment up to (not including) the line break."""
        start_pos = self.pos
        self._advance()  # Skip '#'

        while self.pos < len(self.source) and self._current() not in LINE_BREAKS:
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.COMMENT, lexeme, lexeme[1:], location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Scan digits with at most one decimal point."""
        start_pos = self.pos
        seen_dot = False

        while self.pos < len(self.source):
            char = self._current()
            if char in DIGITS:
                self._advance()
            elif char == "." and not seen_dot:
                seen_dot = True
                self._advance()
            else:
                break

        lexeme = self.source[start_pos:self.pos]
        if seen_dot:
            return Token(TokenType.FLOAT, lexeme, float(lexeme), location)
        return Token(TokenType.INTEGER, lexeme, int(lexeme), location)

    def _tokenize_identifier_or_keyword(self, location: SourceLocation) -> Token:
        """Scan an identifier and look it up in the keyword table."""
        start_pos = self.pos
        self._advance()

        while self.pos < len(self.source) and (self._current().isalnum() or self._current() == "_"):
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)

        if token_type == TokenType.IDENTIFIER:
            value = lexeme
        elif token_type == TokenType.BOOLEAN:
            value = lexeme == "True"
        else:
            value = None

        return Token(token_type, lexeme, value, location)

    def _report(self, error: LexerError):
        """Raise in strict mode, otherwise keep going with a warning."""
        if self.config.strict:
            raise error

        logger.debug(f"{error.location}: {error.diagnostic.message}")
        self.warnings.append(error.to_warning())

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _current(self) -> str:
        """Character under the cursor, or '' at end of input."""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ""

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos >= len(self.source):
            return

        char = self.source[self.pos]
        self.pos += 1

        # \r\n counts as a single line break for positions
        if char == "\n" or (char == "\r" and self._current() != "\n"):
            self.line += 1
            self.column = 1
        else:
            self.column += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def has_warnings(self) -> bool:
        """Check if lexer recorded any warnings."""
        return len(self.warnings) > 0


def clean_tokens(tokens: List[Token], keep_comments: bool = False) -> List[Token]:
    """
    Normalize a raw token stream for the parser.

    Drops COMMENT tokens (unless keep_comments), collapses consecutive
    NEWLINE tokens into one, and drops DEDENT tokens that would take the
    indentation depth below zero.
    """
    cleaned: List[Token] = []
    depth = 0

    for token in tokens:
        if token.type == TokenType.COMMENT and not keep_comments:
            continue

        if token.type == TokenType.NEWLINE and cleaned and cleaned[-1].type == TokenType.NEWLINE:
            continue

        if token.type == TokenType.INDENT:
            depth += 1
        elif token.type == TokenType.DEDENT:
            if depth == 0:
                logger.debug(f"{token.location}: dropping dedent below level zero")
                continue
            depth -= 1

        cleaned.append(token)

    return cleaned


def tokenize(source: str, filename: str = "<string>",
             config: Optional[LexerConfig] = None) -> List[Token]:
    """
    Tokenize a source string and normalize the result.

    Args:
        source: Source code string
        filename: Filename for error reporting
        config: Lexing options

    Returns:
        Cleaned list of tokens ending in EOF

    Raises:
        LexerError: Only when config.strict is set
    """
    config = config or LexerConfig()
    lexer = Lexer(source, filename, config)
    return clean_tokens(lexer.tokenize(), keep_comments=config.keep_comments)


def tokenize_file(filepath: str, config: Optional[LexerConfig] = None) -> List[Token]:
    """
    Tokenize a source file.

    Raises:
        LexerError: Only when config.strict is set
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize(source, filepath, config)
