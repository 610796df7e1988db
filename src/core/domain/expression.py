"""
Expression tree — Узлы дерева выражения

Дерево строится парсером и принадлежит одному вызову evaluate().
Каждый узел владеет своими потомками (без разделения и без циклов).
"""

from dataclasses import dataclass
from decimal import Decimal

from src.core.domain.tokens import FunctionName, Operator


@dataclass(frozen=True)
class Literal:
    """Числовое значение (в т.ч. подставленная константа π / e)"""

    value: Decimal


@dataclass(frozen=True)
class UnaryOp:
    """Унарный + или -"""

    operator: Operator
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    """Бинарная операция: + - * / ^ #"""

    operator: Operator
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class FunctionCall:
    """Применение функции к аргументу"""

    function: FunctionName
    argument: "Node"


Node = Literal | UnaryOp | BinaryOp | FunctionCall
