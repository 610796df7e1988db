"""
Pipeline — Точки входа движка

evaluate():  каноническое выражение → tokenize → parse → evaluate → EvaluationResult
calculate(): сырой ввод клавиатуры → normalize → evaluate()

Синтаксические ошибки (TokenizationError / ParseError) превращаются в
EvaluationResult.syntax_error; сигналы вычисления — в EvaluationResult.signal.
Ошибки конфигурации (precision < 1 и т.п.) пробрасываются как ValidationError.
"""

import logging

from src.core.config import get_settings
from src.core.domain.context import AngleMode, EvaluationContext
from src.core.domain.result import EvaluationResult, EvaluationSignal, ExpressionSyntaxError
from src.engine.evaluator import ExpressionEvaluator
from src.engine.normalizer import normalize
from src.engine.parser import parse
from src.engine.tokenizer import tokenize

logger = logging.getLogger(__name__)


def _resolve_context(
    context: EvaluationContext | None,
    angle_mode: AngleMode | str | None,
    precision: int | None,
) -> EvaluationContext:
    if context is None:
        return EvaluationContext.from_settings(
            get_settings(),
            angle_mode=angle_mode,
            precision=precision,
        )

    overrides = {}
    if angle_mode is not None:
        overrides["angle_mode"] = angle_mode
    if precision is not None:
        overrides["precision"] = precision
    if not overrides:
        return context

    # Пересоздание (не model_copy), чтобы переопределения прошли валидацию
    return EvaluationContext(**{**context.model_dump(), **overrides})


def evaluate(
    expression: str,
    angle_mode: AngleMode | str | None = None,
    precision: int | None = None,
    context: EvaluationContext | None = None,
) -> EvaluationResult:
    """
    Вычисление канонического выражения.

    Args:
        expression: Каноническое выражение (например, результат normalize)
        angle_mode: Переопределение единиц углов
        precision: Переопределение числа значащих цифр
        context: Готовый контекст (иначе строится из EngineSettings)

    Returns:
        EvaluationResult с ровно одним исходом

    Raises:
        pydantic.ValidationError: Некорректные angle_mode / precision

    Examples:
        >>> evaluate("2+3*4").value
        Decimal('14')
        >>> evaluate("1/0").signal
        <EvaluationSignal.DIVISION_BY_ZERO: 'DIVISION_BY_ZERO'>
        >>> evaluate("2+").syntax_error.kind
        <SyntaxErrorKind.MISSING_OPERAND: 'MISSING_OPERAND'>
    """
    resolved = _resolve_context(context, angle_mode, precision)

    try:
        tokens = tokenize(expression)
        tree = parse(
            tokens,
            constant_digits=resolved.working_precision,
            max_depth=resolved.max_depth,
        )
    except ExpressionSyntaxError as exc:
        logger.debug("Syntax error in %r: %s", expression, exc)
        return EvaluationResult.failed(exc)

    outcome = ExpressionEvaluator(resolved).evaluate(tree)

    if isinstance(outcome, EvaluationSignal):
        return EvaluationResult.signaled(outcome)

    logger.debug("Evaluated %r = %s", expression, outcome)
    return EvaluationResult.success(outcome)


def calculate(
    raw: str,
    angle_mode: AngleMode | str | None = None,
    precision: int | None = None,
    decimal_separator: str = ".",
    grouping_separator: str = ",",
    context: EvaluationContext | None = None,
) -> EvaluationResult:
    """
    Нормализация ввода клавиатуры и вычисление.

    Examples:
        >>> calculate("50+20%").value
        Decimal('60')
        >>> calculate("2√9").value
        Decimal('6')
    """
    expression = normalize(raw, decimal_separator, grouping_separator)
    return evaluate(expression, angle_mode=angle_mode, precision=precision, context=context)
