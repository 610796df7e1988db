"""
Numerical Safeguards — Safe Decimal Primitives

Модуль обеспечивает численную устойчивость всех decimal-операций движка:
- Per-call decimal.Context с ловушками, отображаемыми в сигналы вычисления
- Безопасное деление и остаток с сигналом DIVISION_BY_ZERO вместо исключения
- NaN/Inf санитизация: невалидные значения превращаются в сигналы
- Epsilon-защиты: "прилипание к нулю" для результатов тригонометрии
- Округление результата до заданной точности

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на точный ноль никогда не выполняется (возвращается сигнал)
2. NaN/Inf никогда не пропагируют как значения (заменяются на сигналы)
3. Глобальный decimal-контекст не используется и не изменяется
4. Все операции детерминированы и воспроизводимы
"""

import decimal
from decimal import Decimal

from src.core.domain.result import EvaluationSignal

# Значение или сигнал: результат любого шага вычисления
Outcome = Decimal | EvaluationSignal

# Ловушки контекста: всё остальное (Inexact, Rounded, Underflow...) штатно
TRAPPED_CONDITIONS: tuple[type[decimal.DecimalException], ...] = (
    decimal.InvalidOperation,
    decimal.DivisionByZero,
    decimal.Overflow,
)


# =============================================================================
# КОНТЕКСТ
# =============================================================================


def make_decimal_context(precision: int) -> decimal.Context:
    """
    Создание изолированного decimal-контекста.

    Контекст создаётся на каждый вызов и передаётся явно во все операции,
    поэтому параллельные вычисления не влияют друг на друга.

    Args:
        precision: Число значащих цифр

    Returns:
        decimal.Context с ROUND_HALF_EVEN и ловушками TRAPPED_CONDITIONS

    Raises:
        ValueError: Если precision < 1
    """
    validate_precision(precision)

    return decimal.Context(
        prec=precision,
        rounding=decimal.ROUND_HALF_EVEN,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=list(TRAPPED_CONDITIONS),
    )


def signal_from_exception(exc: decimal.DecimalException) -> EvaluationSignal:
    """
    Отображение сработавшей ловушки decimal в сигнал вычисления.

    - DivisionByZero / DivisionUndefined (оба ZeroDivisionError) → DIVISION_BY_ZERO
    - Overflow → INFINITY
    - прочие InvalidOperation → NOT_A_NUMBER

    Examples:
        >>> signal_from_exception(decimal.Overflow())
        <EvaluationSignal.INFINITY: 'INFINITY'>
    """
    if isinstance(exc, ZeroDivisionError):
        return EvaluationSignal.DIVISION_BY_ZERO
    if isinstance(exc, decimal.Overflow):
        return EvaluationSignal.INFINITY
    return EvaluationSignal.NOT_A_NUMBER


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def safe_divide(
    numerator: Decimal,
    denominator: Decimal,
    context: decimal.Context,
) -> Outcome:
    """
    Безопасное деление с сигналом вместо исключения.

    В отличие от float-деления epsilon-защита здесь не применяется: делитель,
    который редуцировался к точному нулю, означает DIVISION_BY_ZERO, а любой
    ненулевой делитель допустим.

    Args:
        numerator: Числитель
        denominator: Знаменатель
        context: Контекст вычисления (make_decimal_context)

    Returns:
        Частное или EvaluationSignal

    Examples:
        >>> safe_divide(Decimal(7), Decimal(2), make_decimal_context(10))
        Decimal('3.5')
        >>> safe_divide(Decimal(1), Decimal(0), make_decimal_context(10))
        <EvaluationSignal.DIVISION_BY_ZERO: 'DIVISION_BY_ZERO'>
    """
    if denominator.is_zero():
        return EvaluationSignal.DIVISION_BY_ZERO

    try:
        return context.divide(numerator, denominator)
    except decimal.DecimalException as exc:
        return signal_from_exception(exc)


def safe_remainder(
    dividend: Decimal,
    divisor: Decimal,
    context: decimal.Context,
) -> Outcome:
    """
    Остаток от деления (знак делимого) с сигналом вместо исключения.

    Если целая часть частного не помещается в точность контекста,
    decimal не может вычислить точный остаток → NOT_A_NUMBER.

    Examples:
        >>> safe_remainder(Decimal(-7), Decimal(3), make_decimal_context(10))
        Decimal('-1')
    """
    if divisor.is_zero():
        return EvaluationSignal.DIVISION_BY_ZERO

    try:
        return context.remainder(dividend, divisor)
    except decimal.DecimalException as exc:
        return signal_from_exception(exc)


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_signal(outcome: Outcome) -> bool:
    """True если шаг вычисления завершился сигналом"""
    return isinstance(outcome, EvaluationSignal)


def sanitize_decimal(value: Decimal, max_magnitude: Decimal) -> Outcome:
    """
    Санитизация decimal: NaN/Inf и слишком большие значения → сигналы.

    Отрицательный ноль нормализуется в Decimal(0).

    Args:
        value: Исходное значение
        max_magnitude: Порог модуля (включительно допустимый)

    Returns:
        value, Decimal(0) или EvaluationSignal

    Examples:
        >>> sanitize_decimal(Decimal("NaN"), Decimal(10))
        <EvaluationSignal.NOT_A_NUMBER: 'NOT_A_NUMBER'>
        >>> sanitize_decimal(Decimal("11"), Decimal(10))
        <EvaluationSignal.INFINITY: 'INFINITY'>
        >>> sanitize_decimal(Decimal("-0"), Decimal(10))
        Decimal('0')
    """
    if value.is_nan():
        return EvaluationSignal.NOT_A_NUMBER

    if value.is_infinite() or value.copy_abs() > max_magnitude:
        return EvaluationSignal.INFINITY

    if value.is_zero():
        return Decimal(0)

    return value


# =============================================================================
# EPSILON-ПРОВЕРКИ
# =============================================================================


def is_integral(value: Decimal) -> bool:
    """
    Проверка, что конечное значение целое (5, 5.0, 5.000 → True).

    Examples:
        >>> is_integral(Decimal("59.0"))
        True
        >>> is_integral(Decimal("5.003"))
        False
    """
    return value == value.to_integral_value()


def is_negligible(value: Decimal, precision: int, scale: Decimal | None = None) -> bool:
    """
    Проверка, что |value| < |scale| * 10^-precision (scale по умолчанию 1).

    adjusted() — показатель старшей значащей цифры, поэтому сравнение
    выполняется по порядкам величины без вычислений.

    Examples:
        >>> is_negligible(Decimal("1E-110"), 100)
        True
        >>> is_negligible(Decimal("1E-120"), 100, scale=Decimal("1E-120"))
        False
    """
    if value.is_zero():
        return True
    if scale is None or scale.is_zero():
        return value.adjusted() < -precision
    return value.adjusted() < scale.adjusted() - precision


def snap_to_zero(value: Decimal, precision: int, scale: Decimal | None = None) -> Decimal:
    """
    "Прилипание к нулю" для значений ниже разрешения результата.

    sin(2π), вычисленный с working precision, равен ~1e-110, а не 0.
    На точности результата такое значение неотличимо от нуля и считается
    точным нулём: так 1/sin(2π) становится делением на ноль.

    Порог берётся относительно scale (модуль аргумента функции): остаток
    от приближения π растёт вместе с аргументом, а sin(1e-120) — это
    настоящее значение 1e-120, а не шум.

    Examples:
        >>> snap_to_zero(Decimal("1E-110"), 100)
        Decimal('0')
        >>> snap_to_zero(Decimal("0.5"), 100)
        Decimal('0.5')
        >>> snap_to_zero(Decimal("1E-120"), 100, scale=Decimal("1E-120"))
        Decimal('1E-120')
    """
    if is_negligible(value, precision, scale):
        return Decimal(0)
    return value


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def round_to_precision(value: Decimal, precision: int) -> Decimal:
    """
    Округление результата до precision значащих цифр.

    Целые результаты, помещающиеся в точность, приводятся к показателю 0
    (5E+1 → 50), остальные нормализуются без хвостовых нулей (2.000 → 2).

    Args:
        value: Конечное значение
        precision: Значащие цифры результата

    Returns:
        Округлённое значение

    Examples:
        >>> round_to_precision(Decimal("5E+1"), 10)
        Decimal('50')
        >>> round_to_precision(Decimal("0.01000"), 10)
        Decimal('0.01')
        >>> round_to_precision(Decimal("1.99999999999999"), 10)
        Decimal('2')
    """
    context = make_decimal_context(precision)
    rounded = context.plus(value)

    if rounded.is_zero():
        return Decimal(0)

    if is_integral(rounded) and rounded.adjusted() < precision:
        return rounded.quantize(Decimal(1), context=context)

    return rounded.normalize(context)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_precision(precision: int) -> None:
    """
    Валидация числа значащих цифр.

    Raises:
        ValueError: Если precision не целое или < 1
    """
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ValueError(f"precision must be an int, got {precision!r}")

    if precision < 1:
        raise ValueError(f"precision must be >= 1, got {precision}")
