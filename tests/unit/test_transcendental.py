"""
Тесты для модуля Transcendental (mpmath bridge)

Проверяет:
1. Изолированные mpmath-контексты
2. Значения констант π и e
3. Тригонометрию в обоих режимах углов и прилипание к нулю
4. Домены обратных функций
5. Непрерывный факториал через Gamma
"""

from decimal import Decimal

import mpmath
import pytest

from src.core.domain.context import AngleMode
from src.core.domain.result import EvaluationSignal
from src.core.domain.tokens import Constant, FunctionName
from src.core.math.transcendental import (
    constant_value,
    evaluate_trigonometric,
    gamma_factorial,
    new_mp_context,
    to_decimal,
)


@pytest.fixture
def mp():
    return new_mp_context(30)


def assert_close(value: Decimal, expected: str, digits: int = 25) -> None:
    assert isinstance(value, Decimal)
    assert abs(value - Decimal(expected)) < Decimal(10) ** -digits


# =============================================================================
# КОНТЕКСТ И КОНВЕРСИЯ
# =============================================================================


class TestMpContext:
    """Тесты для new_mp_context / to_decimal"""

    def test_precision_applied(self) -> None:
        """dps контекста равен запрошенной точности"""
        assert new_mp_context(50).dps == 50

    def test_global_context_untouched(self) -> None:
        """Глобальный mpmath.mp не меняется"""
        before = mpmath.mp.dps
        new_mp_context(200)
        assert mpmath.mp.dps == before

    def test_invalid_digits_raises(self) -> None:
        """digits < 1 → ValueError"""
        with pytest.raises(ValueError):
            new_mp_context(0)

    def test_non_finite_become_signals(self, mp) -> None:
        """NaN / Inf из mpmath → сигналы"""
        assert to_decimal(mp, mp.nan) == EvaluationSignal.NOT_A_NUMBER
        assert to_decimal(mp, mp.inf) == EvaluationSignal.INFINITY
        assert to_decimal(mp, -mp.inf) == EvaluationSignal.INFINITY


class TestConstantValue:
    """Тесты для constant_value"""

    def test_pi(self) -> None:
        """π с заданным числом цифр"""
        assert constant_value(Constant.PI, 10) == Decimal("3.141592654")

    def test_e(self) -> None:
        """e с заданным числом цифр"""
        assert constant_value(Constant.E, 5) == Decimal("2.7183")

    def test_working_precision_digits(self) -> None:
        """Высокая точность: известный префикс π"""
        value = constant_value(Constant.PI, 110)
        assert str(value).startswith("3.14159265358979323846264338327950288")
        assert len(value.as_tuple().digits) == 110


# =============================================================================
# ТРИГОНОМЕТРИЯ
# =============================================================================


class TestEvaluateTrigonometric:
    """Тесты для evaluate_trigonometric"""

    def test_sin_degrees(self, mp) -> None:
        """sin(30°) = 0.5"""
        result = evaluate_trigonometric(mp, FunctionName.SIN, Decimal(30), AngleMode.DEGREES, 20)
        assert_close(result, "0.5")

    def test_cos_radians(self, mp) -> None:
        """cos(2) в радианах"""
        result = evaluate_trigonometric(mp, FunctionName.COS, Decimal(2), AngleMode.RADIANS, 20)
        assert_close(result, "-0.416146836547142386997568229500762", 25)

    def test_sin_of_pi_snaps_to_zero(self, mp) -> None:
        """sin(π) ниже разрешения → точный 0"""
        pi = constant_value(Constant.PI, 30)
        result = evaluate_trigonometric(mp, FunctionName.SIN, pi, AngleMode.RADIANS, 20)
        assert result == Decimal(0)

    def test_sin_180_degrees_is_zero(self, mp) -> None:
        """sin(180°) = 0"""
        result = evaluate_trigonometric(mp, FunctionName.SIN, Decimal(180), AngleMode.DEGREES, 20)
        assert result == Decimal(0)

    def test_tan_at_odd_multiple_of_right_angle(self, mp) -> None:
        """tan(90°) и tan(270°) = 0 по соглашению"""
        for angle in (90, 270, -90):
            result = evaluate_trigonometric(
                mp, FunctionName.TAN, Decimal(angle), AngleMode.DEGREES, 20
            )
            assert result == Decimal(0)

    def test_tan_degrees(self, mp) -> None:
        """tan(45°) = 1"""
        result = evaluate_trigonometric(mp, FunctionName.TAN, Decimal(45), AngleMode.DEGREES, 20)
        assert_close(result, "1")

    def test_inverse_degrees(self, mp) -> None:
        """Обратные функции возвращают градусы в режиме DEGREES"""
        result = evaluate_trigonometric(mp, FunctionName.ARCSIN, Decimal(1), AngleMode.DEGREES, 20)
        assert_close(result, "90")

        result = evaluate_trigonometric(mp, FunctionName.ARCTAN, Decimal(1), AngleMode.DEGREES, 20)
        assert_close(result, "45")

    def test_inverse_radians(self, mp) -> None:
        """arctan(1) = π/4"""
        result = evaluate_trigonometric(mp, FunctionName.ARCTAN, Decimal(1), AngleMode.RADIANS, 20)
        assert_close(result, "0.785398163397448309615660845819876")

    @pytest.mark.parametrize("function", [FunctionName.ARCSIN, FunctionName.ARCCOS])
    @pytest.mark.parametrize("value", ["1.0001", "-2", "100"])
    def test_inverse_out_of_domain(self, mp, function: FunctionName, value: str) -> None:
        """arcsin/arccos вне [-1, 1] → NOT_A_NUMBER"""
        result = evaluate_trigonometric(mp, function, Decimal(value), AngleMode.RADIANS, 20)
        assert result == EvaluationSignal.NOT_A_NUMBER

    def test_non_trigonometric_function_raises(self, mp) -> None:
        """Не тригонометрическая функция → ValueError"""
        with pytest.raises(ValueError, match="Not a trigonometric function"):
            evaluate_trigonometric(mp, FunctionName.LN, Decimal(1), AngleMode.RADIANS, 20)


# =============================================================================
# GAMMA
# =============================================================================


class TestGammaFactorial:
    """Тесты для gamma_factorial"""

    def test_half(self, mp) -> None:
        """0.5! = Γ(1.5) = √π / 2"""
        assert_close(gamma_factorial(mp, Decimal("0.5")), "0.886226925452758013649083741671")

    def test_negative_half(self, mp) -> None:
        """(-0.5)! = Γ(0.5) = √π"""
        assert_close(gamma_factorial(mp, Decimal("-0.5")), "1.77245385090551602729816748334")

    def test_integer_matches_factorial(self, mp) -> None:
        """Для целых Gamma совпадает с произведением"""
        assert_close(gamma_factorial(mp, Decimal(5)), "120")

    def test_fractional_corpus_values(self, mp) -> None:
        """Значения из рабочих примеров клавиатуры"""
        assert float(gamma_factorial(mp, Decimal("5.003"))) == pytest.approx(120.6158752971739)
        assert float(gamma_factorial(mp, Decimal("3.01"))) == pytest.approx(6.075928540616668)
        assert float(gamma_factorial(mp, Decimal("7.08"))) == pytest.approx(5924.414931297129)

    def test_negative_integer_pole(self, mp) -> None:
        """Отрицательное целое → полюс Gamma → NOT_A_NUMBER"""
        assert gamma_factorial(mp, Decimal(-3)) == EvaluationSignal.NOT_A_NUMBER
        assert gamma_factorial(mp, Decimal("-1.0")) == EvaluationSignal.NOT_A_NUMBER
