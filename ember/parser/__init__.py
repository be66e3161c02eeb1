"""
Ember Parser Package

Recursive descent parser for Ember. Consumes the cleaned token stream
from ember.lexer and produces a Program tree.

Key Features:
- One method per precedence level, all left associative
- Indentation-delimited blocks for if and def
- Fail-fast errors with kind, code and source location

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse, parse_string, parse_file
from .errors import ParseError, ParseErrorKind

__all__ = [
    # Core parser
    "Parser", "parse", "parse_string", "parse_file",

    # AST nodes
    "ASTNode", "ASTVisitor", "SourceSpan", "Operator",
    "Program", "Statement", "Expression",
    "ExpressionStatement", "IfStatement", "FunctionDefinitionStatement",
    "Literal", "Identifier", "UnaryExpression", "BinaryExpression",
    "FunctionCallExpression", "AssignmentExpression",
    "dump_ast",

    # Error handling
    "ParseError", "ParseErrorKind",
]
