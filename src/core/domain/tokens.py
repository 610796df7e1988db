"""
Token — Лексема канонического выражения

Immutable dataclass. Последовательность токенов строится токенизатором
заново для каждого вызова; порядок совпадает с порядком в исходной строке.
"""

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================


class TokenType(str, Enum):
    """Тип лексемы"""

    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    FUNCTION = "FUNCTION"
    CONSTANT = "CONSTANT"
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"


class Operator(str, Enum):
    """Операторы канонической формы (× и ÷ уже заменены на * и /)"""

    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"
    MODULO = "#"


class FunctionName(str, Enum):
    """Функции одного аргумента"""

    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ARCSIN = "arcsin"
    ARCCOS = "arccos"
    ARCTAN = "arctan"
    LN = "ln"
    LOG = "log"
    LOGTEN = "logten"
    EXP = "exp"
    SQRT = "sqrt"
    FACTORIAL = "factorial"


class Constant(str, Enum):
    """Математические константы"""

    PI = "π"
    E = "e"


# Функции, аргумент или результат которых является углом
TRIGONOMETRIC_FUNCTIONS: frozenset[FunctionName] = frozenset(
    {
        FunctionName.SIN,
        FunctionName.COS,
        FunctionName.TAN,
        FunctionName.ARCSIN,
        FunctionName.ARCCOS,
        FunctionName.ARCTAN,
    }
)


# =============================================================================
# TOKEN
# =============================================================================


@dataclass(frozen=True)
class Token:
    """Лексема с исходным текстом и смещением в строке."""

    type: TokenType
    text: str
    position: int
    symbol: Operator | FunctionName | Constant | None = None

    def is_operator(self, *operators: Operator) -> bool:
        """True если токен — один из перечисленных операторов"""
        return self.type == TokenType.OPERATOR and self.symbol in operators
