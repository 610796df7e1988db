"""
Evaluator — Вычисление дерева выражения

Обходит дерево с decimal-арифметикой на working precision; трансцендентные
функции, которых нет в decimal (тригонометрия, Gamma), делегируются mpmath.

Исход каждого узла — Decimal или EvaluationSignal. Сигнал, полученный
любым поддеревом, поднимается наверх без дальнейших вычислений.

Порядок проверок для узла:
1. Вычисление операндов (сигнал → немедленный возврат)
2. Доменные правила операции (0^-1, sqrt(-1), ln(0), (-3)!, ...)
3. decimal / mpmath вычисление (ловушки decimal → сигналы)
4. Санитизация: |x| > max_magnitude → INFINITY

Итоговое значение округляется до precision значащих цифр.
"""

import decimal
import logging
from decimal import Decimal
from typing import Callable, Final

from mpmath.ctx_mp import MPContext

from src.core.domain.context import EvaluationContext
from src.core.domain.expression import BinaryOp, FunctionCall, Literal, Node, UnaryOp
from src.core.domain.result import EvaluationSignal
from src.core.domain.tokens import TRIGONOMETRIC_FUNCTIONS, FunctionName, Operator
from src.core.math.numerical_safeguards import (
    Outcome,
    is_integral,
    is_signal,
    make_decimal_context,
    round_to_precision,
    safe_divide,
    safe_remainder,
    sanitize_decimal,
    signal_from_exception,
)
from src.core.math.transcendental import (
    evaluate_trigonometric,
    gamma_factorial,
    new_mp_context,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DISPATCH TABLES
# =============================================================================

_ARITHMETIC: Final[dict[Operator, Callable[[decimal.Context, Decimal, Decimal], Decimal]]] = {
    Operator.PLUS: decimal.Context.add,
    Operator.MINUS: decimal.Context.subtract,
    Operator.MULTIPLY: decimal.Context.multiply,
}

_LOGARITHMS: Final[dict[FunctionName, Callable[[decimal.Context, Decimal], Decimal]]] = {
    FunctionName.LN: decimal.Context.ln,
    FunctionName.LOG: decimal.Context.log10,
    FunctionName.LOGTEN: decimal.Context.log10,
}


# =============================================================================
# EVALUATOR
# =============================================================================


class ExpressionEvaluator:
    """
    Вычислитель дерева выражения для одного контекста.

    Держит decimal-контекст и (лениво) mpmath-контекст на working precision.
    Экземпляр не разделяется между потоками: mpmath временно меняет точность
    своего контекста внутри функций.

    Args:
        context: Контекст вычисления (по умолчанию EvaluationContext())

    Examples:
        >>> from src.engine.parser import parse
        >>> from src.engine.tokenizer import tokenize
        >>> ExpressionEvaluator().evaluate(parse(tokenize("2^0.5*2^0.5")))
        Decimal('2')
    """

    def __init__(self, context: EvaluationContext | None = None):
        self.context = context or EvaluationContext()
        self._decimal = make_decimal_context(self.context.working_precision)
        self._mp: MPContext | None = None

    @property
    def _mpmath(self) -> MPContext:
        if self._mp is None:
            self._mp = new_mp_context(self.context.working_precision)
        return self._mp

    def evaluate(self, node: Node) -> Outcome:
        """
        Вычисление дерева.

        Returns:
            Decimal, округлённый до precision, или EvaluationSignal
        """
        outcome = self._evaluate(node)
        if is_signal(outcome):
            logger.debug("Evaluation signaled %s", outcome.value)
            return outcome
        return round_to_precision(outcome, self.context.precision)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def _evaluate(self, node: Node) -> Outcome:
        if isinstance(node, Literal):
            return self._sanitize(node.value)

        if isinstance(node, BinaryOp):
            return self._evaluate_binary_chain(node)

        if isinstance(node, UnaryOp):
            operand = self._evaluate(node.operand)
            if is_signal(operand):
                return operand
            if node.operator == Operator.MINUS:
                return self._sanitize(self._decimal.minus(operand))
            return self._decimal.plus(operand)

        if isinstance(node, FunctionCall):
            argument = self._evaluate(node.argument)
            if is_signal(argument):
                return argument
            return self._apply_function(node.function, argument)

        raise TypeError(f"Unknown expression node: {node!r}")

    def _evaluate_binary_chain(self, node: BinaryOp) -> Outcome:
        # Левые цепочки (1+2+3+...) разворачиваются итеративно: длина
        # цепочки не ограничена глубиной стека
        chain: list[BinaryOp] = []
        current: Node = node
        while isinstance(current, BinaryOp):
            chain.append(current)
            current = current.left

        accumulator = self._evaluate(current)
        for link in reversed(chain):
            if is_signal(accumulator):
                return accumulator
            right = self._evaluate(link.right)
            if is_signal(right):
                return right
            accumulator = self._apply_binary(link.operator, accumulator, right)

        return accumulator

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def _apply_binary(self, operator: Operator, left: Decimal, right: Decimal) -> Outcome:
        if operator == Operator.DIVIDE:
            result = safe_divide(left, right, self._decimal)
        elif operator == Operator.MODULO:
            result = safe_remainder(left, right, self._decimal)
        elif operator == Operator.POWER:
            result = self._power(left, right)
        elif operator in _ARITHMETIC:
            result = self._guarded(_ARITHMETIC[operator], self._decimal, left, right)
        else:
            raise ValueError(f"Unsupported operator: {operator}")

        if is_signal(result):
            return result
        return self._sanitize(result)

    def _power(self, base: Decimal, exponent: Decimal) -> Outcome:
        """
        Возведение в степень.

        - x^0 = 1 для любого x (включая 0^0)
        - 0^y = 0 при y > 0, DIVISION_BY_ZERO при y < 0
        - отрицательное основание с дробным показателем → NOT_A_NUMBER
        """
        if exponent.is_zero():
            return Decimal(1)

        if base.is_zero():
            if exponent > 0:
                return Decimal(0)
            return EvaluationSignal.DIVISION_BY_ZERO

        integral = is_integral(exponent)
        if base < 0 and not integral:
            return EvaluationSignal.NOT_A_NUMBER

        if integral:
            # 2^3.000 считается как целая степень (точно)
            exponent = exponent.to_integral_value()

        return self._guarded(decimal.Context.power, self._decimal, base, exponent)

    # -------------------------------------------------------------------------
    # Functions
    # -------------------------------------------------------------------------

    def _apply_function(self, function: FunctionName, argument: Decimal) -> Outcome:
        if function in TRIGONOMETRIC_FUNCTIONS:
            result = evaluate_trigonometric(
                self._mpmath,
                function,
                argument,
                self.context.angle_mode,
                self.context.precision,
            )
        elif function == FunctionName.SQRT:
            if argument < 0:
                return EvaluationSignal.NOT_A_NUMBER
            result = self._guarded(decimal.Context.sqrt, self._decimal, argument)
        elif function in _LOGARITHMS:
            if argument < 0:
                return EvaluationSignal.NOT_A_NUMBER
            if argument.is_zero():
                return EvaluationSignal.INFINITY
            result = self._guarded(_LOGARITHMS[function], self._decimal, argument)
        elif function == FunctionName.EXP:
            result = self._guarded(decimal.Context.exp, self._decimal, argument)
        elif function == FunctionName.FACTORIAL:
            result = self._factorial(argument)
        else:
            raise ValueError(f"Unsupported function: {function}")

        if is_signal(result):
            return result
        return self._sanitize(result)

    def _factorial(self, argument: Decimal) -> Outcome:
        """
        Факториал: точное произведение для целых, Gamma(x + 1) для дробных.

        - отрицательное целое → NOT_A_NUMBER (полюс Gamma)
        - аргумент выше max_factorial_operand → INFINITY без вычисления
        """
        if argument > self.context.max_factorial_operand:
            return EvaluationSignal.INFINITY

        if not is_integral(argument):
            return gamma_factorial(self._mpmath, argument)

        if argument < 0:
            return EvaluationSignal.NOT_A_NUMBER

        product = Decimal(1)
        for factor in range(2, int(argument) + 1):
            product = self._decimal.multiply(product, factor)
            if product > self.context.max_magnitude:
                return EvaluationSignal.INFINITY

        return product

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _sanitize(self, value: Decimal) -> Outcome:
        return sanitize_decimal(value, self.context.max_magnitude)

    @staticmethod
    def _guarded(operation: Callable[..., Decimal], *args) -> Outcome:
        try:
            return operation(*args)
        except decimal.DecimalException as exc:
            return signal_from_exception(exc)
