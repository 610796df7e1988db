"""
Transcendental — тригонометрия, Gamma и константы произвольной точности

Модуль — мост между decimal (основная арифметика движка) и mpmath
(трансцендентные функции, которых нет в decimal):
- sin / cos / tan и обратные функции с учётом единиц углов
- непрерывный факториал через Gamma(x + 1)
- значения π и e с заданным числом цифр

Каждое вычисление получает собственный mpmath-контекст (new_mp_context),
глобальный mpmath.mp не используется: вызовы из разных потоков независимы.

Обмен значениями идёт через десятичную строку (Decimal → mpf → Decimal),
без промежуточного float.

СОГЛАШЕНИЯ:
1. Результаты sin/cos/tan ниже разрешения результата (относительно модуля
   аргумента в радианах) прилипают к нулю
2. tan в точке, где cos прилипает к нулю (нечётное кратное π/2), равен 0
3. arcsin/arccos вне [-1, 1] → NOT_A_NUMBER (комплексные значения не возвращаются)
"""

from decimal import Decimal
from functools import lru_cache

from mpmath.ctx_mp import MPContext

from src.core.domain.context import AngleMode
from src.core.domain.result import EvaluationSignal
from src.core.domain.tokens import Constant, FunctionName
from src.core.math.numerical_safeguards import Outcome, is_negligible, snap_to_zero


# =============================================================================
# КОНТЕКСТ И КОНВЕРСИЯ
# =============================================================================


def new_mp_context(digits: int) -> MPContext:
    """
    Изолированный mpmath-контекст с точностью digits десятичных цифр.

    Args:
        digits: Точность (mp.dps)

    Returns:
        MPContext
    """
    if digits < 1:
        raise ValueError(f"digits must be >= 1, got {digits}")

    mp = MPContext()
    mp.dps = digits
    return mp


def to_mpf(mp: MPContext, value: Decimal):
    """Decimal → mpf без потери цифр (через строку)"""
    return mp.mpf(str(value))


def to_decimal(mp: MPContext, x) -> Outcome:
    """
    mpf → Decimal с точностью контекста.

    Returns:
        Decimal или сигнал для NaN / ±Inf
    """
    if mp.isnan(x):
        return EvaluationSignal.NOT_A_NUMBER
    if mp.isinf(x):
        return EvaluationSignal.INFINITY
    return Decimal(mp.nstr(x, mp.dps))


@lru_cache(maxsize=64)
def constant_value(constant: Constant, digits: int) -> Decimal:
    """
    Значение константы с digits значащими цифрами.

    Examples:
        >>> constant_value(Constant.PI, 10)
        Decimal('3.141592654')
        >>> constant_value(Constant.E, 5)
        Decimal('2.7183')
    """
    mp = new_mp_context(digits)
    raw = mp.pi if constant is Constant.PI else mp.e
    # +constant вычисляет ленивую константу mpmath на точности контекста
    return Decimal(mp.nstr(+raw, digits))


# =============================================================================
# ТРИГОНОМЕТРИЯ
# =============================================================================


def _angle_argument(mp: MPContext, value: Decimal, angle_mode: AngleMode):
    x = to_mpf(mp, value)
    if angle_mode == AngleMode.DEGREES:
        return mp.radians(x)
    return x


def _snapped(mp: MPContext, x, snap_digits: int, scale: Decimal) -> Outcome:
    result = to_decimal(mp, x)
    if isinstance(result, EvaluationSignal):
        return result
    return snap_to_zero(result, snap_digits, scale)


def evaluate_trigonometric(
    mp: MPContext,
    function: FunctionName,
    value: Decimal,
    angle_mode: AngleMode,
    snap_digits: int,
) -> Outcome:
    """
    Вычисление тригонометрической функции.

    Прямые функции: аргумент в единицах angle_mode; обратные функции:
    результат в единицах angle_mode.

    Args:
        mp: Контекст mpmath (new_mp_context) с working precision
        function: SIN / COS / TAN / ARCSIN / ARCCOS / ARCTAN
        value: Аргумент
        angle_mode: DEGREES или RADIANS
        snap_digits: Разрешение результата для прилипания к нулю

    Returns:
        Decimal или EvaluationSignal

    Raises:
        ValueError: Если function не тригонометрическая

    Examples:
        >>> mp = new_mp_context(30)
        >>> evaluate_trigonometric(mp, FunctionName.TAN, Decimal(90), AngleMode.DEGREES, 20)
        Decimal('0')
    """
    if function in (FunctionName.SIN, FunctionName.COS, FunctionName.TAN):
        x = _angle_argument(mp, value, angle_mode)
        # Порог прилипания масштабируется модулем аргумента в радианах
        scale = value if angle_mode == AngleMode.RADIANS else Decimal(mp.nstr(x, mp.dps))

        if function == FunctionName.SIN:
            return _snapped(mp, mp.sin(x), snap_digits, scale)

        if function == FunctionName.COS:
            return _snapped(mp, mp.cos(x), snap_digits, scale)

        # tan не определён там, где cos == 0: по соглашению результат 0
        cosine = to_decimal(mp, mp.cos(x))
        if isinstance(cosine, Decimal) and is_negligible(cosine, snap_digits, scale):
            return Decimal(0)
        return _snapped(mp, mp.tan(x), snap_digits, scale)

    if function in (FunctionName.ARCSIN, FunctionName.ARCCOS):
        if value.copy_abs() > 1:
            return EvaluationSignal.NOT_A_NUMBER
        x = to_mpf(mp, value)
        angle = mp.asin(x) if function == FunctionName.ARCSIN else mp.acos(x)
    elif function == FunctionName.ARCTAN:
        angle = mp.atan(to_mpf(mp, value))
    else:
        raise ValueError(f"Not a trigonometric function: {function}")

    if angle_mode == AngleMode.DEGREES:
        angle = mp.degrees(angle)
    return to_decimal(mp, angle)


# =============================================================================
# GAMMA
# =============================================================================


def gamma_factorial(mp: MPContext, value: Decimal) -> Outcome:
    """
    Непрерывный факториал: x! = Gamma(x + 1).

    Для отрицательных целых Gamma имеет полюс → NOT_A_NUMBER.

    Examples:
        >>> mp = new_mp_context(20)
        >>> gamma_factorial(mp, Decimal("0.5"))
        Decimal('0.88622692545275801365')
    """
    if value < 0 and value == value.to_integral_value():
        return EvaluationSignal.NOT_A_NUMBER

    return to_decimal(mp, mp.gamma(to_mpf(mp, value) + 1))
