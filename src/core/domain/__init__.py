"""
Domain models and value objects.

Contains the building blocks of the expression pipeline: tokens, expression
tree nodes, evaluation context, results and syntax errors.
"""

from src.core.domain.context import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FACTORIAL_OPERAND,
    DEFAULT_PRECISION,
    DOUBLE_MAX_MAGNITUDE,
    GUARD_DIGITS,
    MAX_DEPTH_LIMIT,
    MAX_PRECISION,
    AngleMode,
    EvaluationContext,
)
from src.core.domain.expression import BinaryOp, FunctionCall, Literal, Node, UnaryOp
from src.core.domain.result import (
    EvaluationResult,
    EvaluationSignal,
    ExpressionSyntaxError,
    ParseError,
    SyntaxErrorKind,
    SyntaxFailure,
    TokenizationError,
)
from src.core.domain.tokens import (
    TRIGONOMETRIC_FUNCTIONS,
    Constant,
    FunctionName,
    Operator,
    Token,
    TokenType,
)

__all__ = [
    # Context
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_FACTORIAL_OPERAND",
    "DEFAULT_PRECISION",
    "DOUBLE_MAX_MAGNITUDE",
    "GUARD_DIGITS",
    "MAX_DEPTH_LIMIT",
    "MAX_PRECISION",
    "AngleMode",
    "EvaluationContext",
    # Expression tree
    "BinaryOp",
    "FunctionCall",
    "Literal",
    "Node",
    "UnaryOp",
    # Results and errors
    "EvaluationResult",
    "EvaluationSignal",
    "ExpressionSyntaxError",
    "ParseError",
    "SyntaxErrorKind",
    "SyntaxFailure",
    "TokenizationError",
    # Tokens
    "TRIGONOMETRIC_FUNCTIONS",
    "Constant",
    "FunctionName",
    "Operator",
    "Token",
    "TokenType",
]
