"""
Ember Recursive Descent Parser

Single pass, no backtracking. Each precedence level is one method that
calls the next level up and loops while the current token belongs to
its own operator set, so every binary level is left associative:

    logical        and or == !=
    comparison     > < >= <=
    additive       + -
    multiplicative * / % **
    primary        literals, names, calls, assignment, ( ... ), -x

Blocks are delimited by the NEWLINE / INDENT / DEDENT tokens the lexer
synthesizes. The first syntax error aborts the parse.

Author: xwest
"""

import logging
from typing import Callable, Dict, FrozenSet, List, Optional

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.lexer import LexerConfig, clean_tokens, tokenize, tokenize_file
from .ast_nodes import (
    SourceSpan, Operator, Program, Statement, ExpressionStatement, IfStatement,
    FunctionDefinitionStatement, Expression, Literal, Identifier, UnaryExpression,
    BinaryExpression, FunctionCallExpression, AssignmentExpression
)
from .errors import (
    ParseError, create_unexpected_token_error, create_missing_identifier_error,
    create_invalid_operator_error, create_invalid_parameter_error,
    create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)

# Open parentheses, unary minus, assignment values, call arguments,
# continuation lines and blocks all count towards this limit
MAX_NESTING_DEPTH = 50


# Token -> AST operator for every operator the grammar builds nodes for
BINARY_OPERATORS: Dict[TokenType, Operator] = {
    TokenType.AND: Operator.AND,
    TokenType.OR: Operator.OR,
    TokenType.DOUBLE_EQUALS: Operator.EQUALITY,
    TokenType.NOT_EQUALS: Operator.NOT_EQUALS,
    TokenType.GREATER_THAN: Operator.GREATER_THAN,
    TokenType.LESS_THAN: Operator.LESS_THAN,
    TokenType.GREATER_EQUAL: Operator.GREATER_THAN_OR_EQUAL,
    TokenType.LESS_EQUAL: Operator.LESS_THAN_OR_EQUAL,
    TokenType.PLUS: Operator.ADD,
    TokenType.MINUS: Operator.SUBTRACT,
    TokenType.STAR: Operator.MULTIPLY,
    TokenType.SLASH: Operator.DIVIDE,
    TokenType.PERCENT: Operator.MODULUS,
    TokenType.DOUBLE_STAR: Operator.EXPONENT,
}

# Tokens each level claims. `in`, `is` and `//` are claimed but have no
# AST operator, so they fail with INVALID_OPERATOR.
LOGICAL_TOKENS = frozenset({
    TokenType.AND, TokenType.OR, TokenType.DOUBLE_EQUALS, TokenType.NOT_EQUALS,
    TokenType.IN, TokenType.IS,
})
COMPARISON_TOKENS = frozenset({
    TokenType.GREATER_THAN, TokenType.LESS_THAN,
    TokenType.GREATER_EQUAL, TokenType.LESS_EQUAL,
})
ADDITIVE_TOKENS = frozenset({TokenType.PLUS, TokenType.MINUS})
MULTIPLICATIVE_TOKENS = frozenset({
    TokenType.STAR, TokenType.SLASH, TokenType.PERCENT, TokenType.DOUBLE_STAR,
    TokenType.DOUBLE_SLASH,
})

LITERAL_KINDS = {
    TokenType.INTEGER: "integer",
    TokenType.FLOAT: "float",
    TokenType.STRING: "string",
    TokenType.BOOLEAN: "boolean",
    TokenType.NONE: "none",
}


class Parser:
    """
    Ember recursive descent parser.

    Consumes a fully materialized token list through a single cursor.
    The list is normalized with clean_tokens first, so raw scans and
    streams that kept their comments parse the same as tokenize output.
    """

    def __init__(self, tokens: List[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the lexer, ending in EOF
        """
        self.tokens = clean_tokens(tokens)
        self.current = 0
        self.depth = 0

    def parse(self) -> Program:
        """
        Parse the token stream into an AST.

        Returns:
            Program AST node representing the entire program

        Raises:
            ParseError: On the first syntax error; nothing partial is returned
        """
        self.current = 0
        self.depth = 0
        body: List[Statement] = []

        try:
            while not self._is_at_end():
                # Skip newlines between top-level statements
                if self._match(TokenType.NEWLINE):
                    continue

                body.append(self._parse_statement())
        except ParseError as e:
            logger.debug(f"parse failed at {e.location}: {e.diagnostic.message}")
            raise
        except RecursionError:
            # Interpreter stack ran out before MAX_NESTING_DEPTH was reached
            error = create_nesting_too_deep_error(self._peek(), MAX_NESTING_DEPTH)
            logger.debug(f"parse failed at {error.location}: {error.diagnostic.message}")
            raise error from None

        start_location = self.tokens[0].location if self.tokens else self._peek().location
        end_location = self.tokens[-1].location if self.tokens else start_location

        logger.debug(f"parsed {len(body)} top-level statements")
        return Program(body, SourceSpan(start_location, end_location))

    # Statements

    def _parse_statement(self) -> Statement:
        """Dispatch on the leading token: if, def, or an expression."""
        if self._check(TokenType.IF):
            return self._parse_if_statement()
        if self._check(TokenType.DEF):
            return self._parse_function_definition()

        start_token = self._peek()
        expression = self._parse_expression()
        self._match(TokenType.SEMICOLON)
        return ExpressionStatement(expression, self._span_from(start_token))

    def _parse_if_statement(self) -> IfStatement:
        """Parse `if ( expression ) : block`."""
        start_token = self._advance()  # Consume 'if'

        self._consume(TokenType.LEFT_PAREN, "'(' after 'if'")
        condition_start = self._peek()
        condition = self._parse_expression()
        test = ExpressionStatement(condition, self._span_from(condition_start))
        self._consume(TokenType.RIGHT_PAREN, "')' after if condition")
        self._consume(TokenType.COLON, "':' after if condition")

        body = self._parse_block_body()
        return IfStatement(test, body, self._span_from(start_token))

    def _parse_function_definition(self) -> FunctionDefinitionStatement:
        """Parse `def name ( params ) : block`."""
        start_token = self._advance()  # Consume 'def'

        name_token = self._peek()
        if name_token.type != TokenType.IDENTIFIER:
            raise create_missing_identifier_error("def", name_token)
        self._advance()
        function_id = Identifier(name_token.value, self._span_from(name_token))

        self._consume(TokenType.LEFT_PAREN, "'(' after function name")

        params: List[Identifier] = []
        if not self._match(TokenType.RIGHT_PAREN):
            while True:
                token = self._advance()
                if token.type == TokenType.IDENTIFIER:
                    params.append(Identifier(token.value, SourceSpan(token.location, token.location)))
                elif token.type == TokenType.COMMA:
                    continue
                elif token.type == TokenType.RIGHT_PAREN:
                    break
                else:
                    raise create_invalid_parameter_error(token)

        self._consume(TokenType.COLON, "':' after parameter list")

        body = self._parse_block_body()
        return FunctionDefinitionStatement(function_id, params, body, self._span_from(start_token))

    def _parse_block_body(self) -> List[Statement]:
        """
        Parse an indented block following ':'.

        The block owns exactly one INDENT and one DEDENT. When several
        blocks close on the same line the remaining DEDENTs are left for
        the enclosing blocks. EOF closes every open block.
        """
        self._consume(TokenType.NEWLINE, "a newline before the block body")
        indent = self._consume(TokenType.INDENT, "an indented block")
        self._enter_nesting(indent)

        body: List[Statement] = []
        try:
            while not self._is_at_end():
                if self._check(TokenType.NEWLINE):
                    self._advance()
                    if self._match(TokenType.DEDENT):
                        break
                    continue

                if self._match(TokenType.DEDENT):
                    break

                body.append(self._parse_statement())
        finally:
            self.depth -= 1

        return body

    # Expressions

    def _parse_expression(self) -> Expression:
        return self._parse_logical()

    def _parse_logical(self) -> Expression:
        return self._parse_binary_level(LOGICAL_TOKENS, self._parse_comparison)

    def _parse_comparison(self) -> Expression:
        return self._parse_binary_level(COMPARISON_TOKENS, self._parse_additive)

    def _parse_additive(self) -> Expression:
        return self._parse_binary_level(ADDITIVE_TOKENS, self._parse_multiplicative)

    def _parse_multiplicative(self) -> Expression:
        return self._parse_binary_level(MULTIPLICATIVE_TOKENS, self._parse_primary)

    def _parse_binary_level(self, operators: FrozenSet[TokenType],
                            parse_operand: Callable[[], Expression]) -> Expression:
        """Parse `operand (op operand)*`, folding to the left."""
        left = parse_operand()

        while self._peek().type in operators:
            operator_token = self._advance()
            operator = BINARY_OPERATORS.get(operator_token.type)
            if operator is None:
                raise create_invalid_operator_error(operator_token)

            right = parse_operand()
            left = BinaryExpression(left, operator, right, SourceSpan(left.span.start, right.span.end))

        return left

    def _parse_primary(self) -> Expression:
        """Parse the innermost, highest-precedence expression."""
        token = self._peek()
        self._enter_nesting(token)
        try:
            return self._parse_primary_expression(token)
        finally:
            self.depth -= 1

    def _parse_primary_expression(self, token: Token) -> Expression:
        if token.type in LITERAL_KINDS:
            self._advance()
            return Literal(token.value, LITERAL_KINDS[token.type], self._span_from(token))

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier()

        if token.type == TokenType.LEFT_PAREN:
            self._advance()
            expression = self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN, "')' after expression")
            return expression

        if token.type == TokenType.MINUS:
            self._advance()
            operand = self._parse_primary()
            return UnaryExpression(operand, Operator.SUBTRACT, self._span_from(token))

        if token.type in (TokenType.NEWLINE, TokenType.INDENT):
            # The expression continues with the next statement
            self._advance()
            nested_start = self._peek()
            statement = self._parse_statement()
            if not isinstance(statement, ExpressionStatement):
                raise create_unexpected_token_error("an expression", nested_start)
            if token.type == TokenType.INDENT:
                self._close_continuation()
            return statement.expression

        raise create_unexpected_token_error("an expression", token)

    def _close_continuation(self):
        """
        Consume the DEDENT that closes an indented continuation line.

        The continuation owns its INDENT, so it must also own the matching
        DEDENT; otherwise the DEDENT would close the enclosing block.
        """
        if self._check(TokenType.NEWLINE):
            self._advance()
        if self._is_at_end() or self._match(TokenType.DEDENT):
            return
        raise create_unexpected_token_error(TokenType.DEDENT, self._peek(),
                                            "the end of the continued line")

    def _parse_identifier(self) -> Expression:
        """Parse a name, a call `name(args)` or an assignment `name = value`."""
        name_token = self._advance()
        identifier = Identifier(name_token.value, self._span_from(name_token))

        if self._match(TokenType.LEFT_PAREN):
            args = self._parse_arguments()
            return FunctionCallExpression(identifier, args, self._span_from(name_token))

        if self._match(TokenType.EQUALS):
            value = self._parse_expression()
            return AssignmentExpression(identifier, value, self._span_from(name_token))

        return identifier

    def _parse_arguments(self) -> List[Expression]:
        """Parse a call's argument list; the '(' is already consumed."""
        args: List[Expression] = []
        if self._match(TokenType.RIGHT_PAREN):
            return args

        while True:
            args.append(self._parse_expression())
            if self._match(TokenType.COMMA):
                continue
            if self._match(TokenType.RIGHT_PAREN):
                return args
            raise create_unexpected_token_error("',' or ')' in argument list", self._peek())

    # Utility methods

    def _enter_nesting(self, token: Token):
        """Count one more open level; callers decrement self.depth when done."""
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            self.depth -= 1
            raise create_nesting_too_deep_error(token, MAX_NESTING_DEPTH)

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token. EOF is never consumed."""
        token = self._peek()
        if token.type != TokenType.EOF:
            self.current += 1
        return token

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Return current token without consuming."""
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        # Synthesize EOF if the list was not terminated
        location = self.tokens[-1].location if self.tokens else SourceLocation("<empty>", 1, 1, 0)
        return Token(TokenType.EOF, "", None, location)

    def _previous(self) -> Token:
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self._peek()

    def _consume(self, token_type: TokenType, expected: Optional[str] = None) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()

        raise create_unexpected_token_error(token_type, self._peek(), expected)

    def _span_from(self, start_token: Token) -> SourceSpan:
        return SourceSpan(start_token.location, self._previous().location)


def parse(tokens: List[Token]) -> Program:
    """
    Parse a token list into a Program.

    Raises:
        ParseError: If parsing fails
    """
    return Parser(tokens).parse()


def parse_string(source: str, filename: str = "<string>",
                 config: Optional[LexerConfig] = None) -> Program:
    """
    Convenience function to parse a source string.

    Raises:
        LexerError: Only with a strict LexerConfig
        ParseError: If parsing fails
    """
    tokens = tokenize(source, filename, config)
    return Parser(tokens).parse()


def parse_file(filepath: str, config: Optional[LexerConfig] = None) -> Program:
    """
    Convenience function to parse a source file.

    Raises:
        LexerError: Only with a strict LexerConfig
        ParseError: If parsing fails
        IOError: If file cannot be read
    """
    tokens = tokenize_file(filepath, config)
    return Parser(tokens).parse()
