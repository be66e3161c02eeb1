"""
Abstract Syntax Tree node definitions for Ember.

Every node owns its children outright: the tree has no parent links,
no sharing and no cycles. Nodes are built once by the parser and never
mutated afterwards. Equality is structural and ignores source spans, so
two parses of the same text compare equal.

Author: xwest
"""

from typing import List, Optional, Any, Tuple
from dataclasses import dataclass
from enum import Enum

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    PROGRAM = "Program"

    # Statements
    EXPRESSION_STMT = "ExpressionStatement"
    IF_STATEMENT = "IfStatement"
    FUNCTION_DEF = "FunctionDefinitionStatement"

    # Expressions
    LITERAL = "Literal"
    IDENTIFIER = "Identifier"
    UNARY_EXPRESSION = "UnaryExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    FUNCTION_CALL = "FunctionCallExpression"
    ASSIGNMENT = "AssignmentExpression"


class Operator(Enum):
    """Operators appearing in unary and binary expressions."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULUS = "%"
    EXPONENT = "**"
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN_OR_EQUAL = "<="
    EQUALITY = "=="
    NOT_EQUALS = "!="
    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor:
    """
    Base visitor. visit() dispatches to visit_<ClassName> and falls back
    to generic_visit, which visits every child.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: 'ASTNode') -> Any:
        for child in node.children():
            self.visit(child)
        return None


class ASTNode:
    """Base class for all AST nodes."""

    # Names of the attributes that make up the node's value
    _fields: Tuple[str, ...] = ()

    def __init__(self, node_type: ASTNodeType, span: Optional[SourceSpan]):
        self.node_type = node_type
        self.span = span

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    def children(self) -> List['ASTNode']:
        """Get all child nodes, in source order."""
        children = []
        for name in self._fields:
            value = getattr(self, name)
            if isinstance(value, ASTNode):
                children.append(value)
            elif isinstance(value, list):
                children.extend(item for item in value if isinstance(item, ASTNode))
        return children

    def __eq__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self._fields)

    __hash__ = None

    def __repr__(self) -> str:
        fields = ", ".join(repr(getattr(self, name)) for name in self._fields)
        return f"{self.__class__.__name__}({fields})"

    def __str__(self) -> str:
        if self.span is None:
            return self.node_type.value
        return f"{self.node_type.value}@{self.span}"


# ============================================================================
# Root
# ============================================================================

class Program(ASTNode):
    """Root AST node: the top-level statements of one source text."""
    body: List['Statement']
    _fields = ("body",)

    def __init__(self, body: List['Statement'], span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.PROGRAM, span)
        self.body = body


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class ExpressionStatement(Statement):
    """An expression standing on its own."""
    expression: 'Expression'
    _fields = ("expression",)

    def __init__(self, expression: 'Expression', span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.EXPRESSION_STMT, span)
        self.expression = expression


class IfStatement(Statement):
    """If statement. The test is the condition as an expression statement."""
    test: ExpressionStatement
    body: List[Statement]
    _fields = ("test", "body")

    def __init__(self, test: ExpressionStatement, body: List[Statement],
                 span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.IF_STATEMENT, span)
        self.test = test
        self.body = body


class FunctionDefinitionStatement(Statement):
    """Function definition with positional parameters."""
    id: 'Identifier'
    params: List['Identifier']
    body: List[Statement]
    _fields = ("id", "params", "body")

    def __init__(self, id: 'Identifier', params: List['Identifier'],
                 body: List[Statement], span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.FUNCTION_DEF, span)
        self.id = id
        self.params = params
        self.body = body


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""
    pass


class Literal(Expression):
    """Literal value expression."""
    value: Any
    literal_type: str  # "integer", "float", "string", "boolean", "none"
    _fields = ("value", "literal_type")

    def __init__(self, value: Any, literal_type: str, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.LITERAL, span)
        self.value = value
        self.literal_type = literal_type


class Identifier(Expression):
    """Identifier expression."""
    name: str
    _fields = ("name",)

    def __init__(self, name: str, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.IDENTIFIER, span)
        self.name = name


class UnaryExpression(Expression):
    """Unary operation expression."""
    operand: Expression
    operator: Operator
    _fields = ("operand", "operator")

    def __init__(self, operand: Expression, operator: Operator, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.UNARY_EXPRESSION, span)
        self.operand = operand
        self.operator = operator


class BinaryExpression(Expression):
    """Binary operation expression."""
    left: Expression
    operator: Operator
    right: Expression
    _fields = ("left", "operator", "right")

    def __init__(self, left: Expression, operator: Operator, right: Expression,
                 span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.BINARY_EXPRESSION, span)
        self.left = left
        self.operator = operator
        self.right = right


class FunctionCallExpression(Expression):
    """Call of a named function."""
    callee: Identifier
    args: List[Expression]
    _fields = ("callee", "args")

    def __init__(self, callee: Identifier, args: List[Expression], span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.FUNCTION_CALL, span)
        self.callee = callee
        self.args = args


class AssignmentExpression(Expression):
    """Assignment of an expression to a name."""
    target: Identifier
    value: Expression
    _fields = ("target", "value")

    def __init__(self, target: Identifier, value: Expression, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.ASSIGNMENT, span)
        self.target = target
        self.value = value


# ============================================================================
# Debug output
# ============================================================================

class ASTDumper(ASTVisitor):
    """Renders a tree as indented text, one node per line."""

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self.depth = 0
        self.lines: List[str] = []

    def _emit(self, text: str):
        self.lines.append(f"{self.indent * self.depth}{text}")

    def _nested(self, label: str, nodes: List[ASTNode]):
        self._emit(f"{label}:")
        self.depth += 1
        for node in nodes:
            self.visit(node)
        self.depth -= 1

    def visit_Literal(self, node: Literal):
        self._emit(f"Literal({node.literal_type}) {node.value!r}")

    def visit_Identifier(self, node: Identifier):
        self._emit(f"Identifier {node.name}")

    def visit_UnaryExpression(self, node: UnaryExpression):
        self._emit(f"UnaryExpression {node.operator.value}")
        self.depth += 1
        self.visit(node.operand)
        self.depth -= 1

    def visit_BinaryExpression(self, node: BinaryExpression):
        self._emit(f"BinaryExpression {node.operator.value}")
        self.depth += 1
        self.visit(node.left)
        self.visit(node.right)
        self.depth -= 1

    def visit_FunctionCallExpression(self, node: FunctionCallExpression):
        self._emit(f"FunctionCallExpression {node.callee.name}")
        self.depth += 1
        self._nested("args", node.args)
        self.depth -= 1

    def visit_AssignmentExpression(self, node: AssignmentExpression):
        self._emit(f"AssignmentExpression {node.target.name}")
        self.depth += 1
        self.visit(node.value)
        self.depth -= 1

    def visit_FunctionDefinitionStatement(self, node: FunctionDefinitionStatement):
        params = ", ".join(param.name for param in node.params)
        self._emit(f"FunctionDefinitionStatement {node.id.name}({params})")
        self.depth += 1
        self._nested("body", node.body)
        self.depth -= 1

    def visit_IfStatement(self, node: IfStatement):
        self._emit("IfStatement")
        self.depth += 1
        self._nested("test", [node.test])
        self._nested("body", node.body)
        self.depth -= 1

    def generic_visit(self, node: ASTNode):
        self._emit(node.node_type.value)
        self.depth += 1
        super().generic_visit(node)
        self.depth -= 1


def dump_ast(node: ASTNode, indent: str = "  ") -> str:
    """Render a node and its subtree as indented text."""
    dumper = ASTDumper(indent)
    dumper.visit(node)
    return "\n".join(dumper.lines)
