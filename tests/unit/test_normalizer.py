"""
Тесты для Normalizer

Проверяемые инварианты:
1. Каждый проход переписывает только свою конструкцию
2. normalize() никогда не падает
3. normalize(normalize(s)) == normalize(s)
4. Недостающие ")" дописываются, лишние не удаляются
"""

import logging

import pytest

from src.engine.normalizer import (
    balance_parentheses,
    insert_implicit_multiplication,
    normalize,
    rewrite_factorials,
    rewrite_percentages,
    rewrite_square_roots,
    substitute_symbols,
)


# =============================================================================
# 1. SYMBOL SUBSTITUTION
# =============================================================================


class TestSubstituteSymbols:
    """Замена глифов и разделителей"""

    def test_display_glyphs(self) -> None:
        """× ÷ − → * / -, пробелы удаляются"""
        assert substitute_symbols("2 × 3 ÷ 4 − 1") == "2*3/4-1"

    def test_default_separators(self) -> None:
        """Разделитель разрядов "," по умолчанию удаляется"""
        assert substitute_symbols("1,234.5") == "1234.5"

    def test_comma_decimal_locale(self) -> None:
        """Локаль с "," в качестве десятичного разделителя"""
        assert substitute_symbols("1.234,5", decimal_separator=",", grouping_separator=".") == "1234.5"

    def test_space_grouping_locale(self) -> None:
        """Пробел как разделитель разрядов"""
        result = substitute_symbols("1 234,5", decimal_separator=",", grouping_separator=" ")
        assert result == "1234.5"

    def test_log_becomes_logten(self) -> None:
        """log → logten, существующий logten не меняется"""
        assert substitute_symbols("log(100)+logten(10)") == "logten(100)+logten(10)"

    def test_percent_kept(self) -> None:
        """% остаётся для прохода процентов"""
        assert substitute_symbols("50 + 20 %") == "50+20%"


# =============================================================================
# 2. IMPLICIT MULTIPLICATION
# =============================================================================


class TestImplicitMultiplication:
    """Вставка пропущенных "*" """

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2(3)", "2*(3)"),
            ("(2)(3)", "(2)*(3)"),
            ("(2)3", "(2)*3"),
            ("2.5(2)", "2.5*(2)"),
            ("3!(2)", "3!*(2)"),
            ("3!2", "3!*2"),
            ("2π", "2*π"),
            ("π2", "π*2"),
            ("ππ", "π*π"),
            ("2√4", "2*√4"),
            ("π√4", "π*√4"),
            ("2sin(30)", "2*sin(30)"),
            ("(1)cos(0)", "(1)*cos(0)"),
            ("2e", "2*e"),
            ("e(2)", "e*(2)"),
            ("e2", "e*2"),
            ("eπ", "e*π"),
            ("πe", "π*e"),
            ("e√4", "e*√4"),
            ("pi(2)", "pi*(2)"),
            ("esin(30)", "e*sin(30)"),
        ],
    )
    def test_inserted(self, raw: str, expected: str) -> None:
        """Пропущенный знак умножения восстанавливается"""
        assert insert_implicit_multiplication(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "2+3",
            "sin(30)",
            "logten(100)",
            "+√4",
            "√√4",
            "(√4",
            "2^√4",
            "12.5",
            "factorial(3)*2",
            "exp(1)",
            "2*exp(1)",
        ],
    )
    def test_not_inserted(self, raw: str) -> None:
        """Явные операторы и вызовы функций не меняются"""
        assert insert_implicit_multiplication(raw) == raw


# =============================================================================
# 3. SQUARE ROOTS
# =============================================================================


class TestSquareRoots:
    """√X → sqrt(X)"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("√9", "sqrt(9)"),
            ("√(9)", "sqrt(9)"),
            ("√2^2", "sqrt(2)^2"),
            ("√√16", "sqrt(sqrt(16))"),
            ("√-4", "sqrt(-4)"),
            ("2*√9+1", "2*sqrt(9)+1"),
            ("(√4)", "(sqrt(4))"),
            ("√sin(30)", "sqrt(sin(30))"),
            ("√4!", "sqrt(4!)"),
            ("√(2^1024)", "sqrt(2^1024)"),
            ("√√(4)+1", "sqrt(sqrt(4))+1"),
            ("√2*√-3", "sqrt(2)*sqrt(-3)"),
            ("(1+√4)*2", "(1+sqrt(4))*2"),
        ],
    )
    def test_rewritten(self, raw: str, expected: str) -> None:
        """Операнд — до оператора вне скобок или закрывающей скобки"""
        assert rewrite_square_roots(raw) == expected

    def test_without_root_unchanged(self) -> None:
        """Выражение без √ не меняется"""
        assert rewrite_square_roots("sqrt(2)+1") == "sqrt(2)+1"

    def test_long_chain(self) -> None:
        """Длинная цепочка √ переписывается без ограничения глубины"""
        depth = 5000
        rewritten = rewrite_square_roots("√" * depth + "4")
        assert rewritten == "sqrt(" * depth + "4" + ")" * depth


# =============================================================================
# 4. FACTORIALS
# =============================================================================


class TestFactorials:
    """X! → factorial(X)"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("5!", "factorial(5)"),
            ("5.5!", "factorial(5.5)"),
            ("3!!", "factorial(factorial(3))"),
            ("(3!)!", "factorial(factorial(3))"),
            ("(1+2)!", "factorial(1+2)"),
            ("sin(30)!", "factorial(sin(30))"),
            ("2*3!", "2*factorial(3)"),
            ("π!", "factorial(π)"),
            ("(2)*(3)!", "(2)*factorial(3)"),
            ("5!+3!", "factorial(5)+factorial(3)"),
        ],
    )
    def test_rewritten(self, raw: str, expected: str) -> None:
        """Операнд — число, константа или группа с именем функции"""
        assert rewrite_factorials(raw) == expected


# =============================================================================
# 5. PERCENTAGES
# =============================================================================


class TestPercentages:
    """Проценты"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("50+20%", "(50)+(50)*(20/100)"),
            ("50-20%", "(50)-(50)*(20/100)"),
            ("100*95%", "100*(95/100)"),
            ("900/10%", "900/(10/100)"),
            ("10%10%", "(10/100)*(10/100)"),
            ("100%10", "(100/100)*10"),
            ("5%(2)", "(5/100)*(2)"),
            ("-5%", "-(5/100)"),
            ("2^-50%", "2^-(50/100)"),
            ("3*(50+20%)", "3*((50)+(50)*(20/100))"),
        ],
    )
    def test_rewritten(self, raw: str, expected: str) -> None:
        """Процент от левой части после + / -, иначе X/100"""
        assert rewrite_percentages(raw) == expected

    def test_chained_percent_of_left_side(self) -> None:
        """50+20%+10%: второй процент берётся от всей левой части"""
        left = "(50)+(50)*(20/100)"
        assert rewrite_percentages("50+20%+10%") == f"({left})+({left})*(10/100)"


# =============================================================================
# 6. PARENTHESES
# =============================================================================


class TestBalanceParentheses:
    """Дописывание ")" """

    def test_missing_appended(self) -> None:
        """Недостающие ")" в конце"""
        assert balance_parentheses("sin(cos(0") == "sin(cos(0))"
        assert balance_parentheses("(1") == "(1)"

    def test_excess_kept(self) -> None:
        """Лишние ")" остаются для парсера"""
        assert balance_parentheses("2)") == "2)"
        assert balance_parentheses(")(") == ")("


# =============================================================================
# FULL PIPELINE
# =============================================================================


class TestNormalize:
    """Все проходы вместе"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2(3+4)", "2*(3+4)"),
            ("√9×(3!", "sqrt(9)*(factorial(3))"),
            ("2√9", "2*sqrt(9)"),
            ("5!+3!", "factorial(5)+factorial(3)"),
            ("log(100)", "logten(100)"),
            ("−3", "-3"),
            ("2√9×10%", "2*sqrt(9)*(10/100)"),
            ("1^(1/sin(2π", "1^(1/sin(2*π))"),
        ],
    )
    def test_canonical_form(self, raw: str, expected: str) -> None:
        """Каноническая форма"""
        assert normalize(raw) == expected

    def test_locale_separators(self) -> None:
        """Разделители передаются в первый проход"""
        assert normalize("1.234,5×2", decimal_separator=",", grouping_separator=".") == "1234.5*2"

    @pytest.mark.parametrize(
        "raw",
        ["2√9×10%", "3!!", "50+20%", "sin(cos(0", "2π(1", "log(100)", "√√16", "3*(50+20%)", "2e"],
    )
    def test_idempotent(self, raw: str) -> None:
        """normalize(normalize(s)) == normalize(s)"""
        once = normalize(raw)
        assert normalize(once) == once

    @pytest.mark.parametrize(
        "raw",
        ["", "%", "!", "√", ")(", "((", "+-*/", "√%!", "√" * 5000 + "4", "(√" * 3000, "√-" * 3000],
    )
    def test_never_fails(self, raw: str) -> None:
        """Нормализатор не бросает исключений на мусорном вводе"""
        assert isinstance(normalize(raw), str)

    def test_logs_canonical_form(self, caplog: pytest.LogCaptureFixture) -> None:
        """Каноническая форма пишется в DEBUG лог"""
        with caplog.at_level(logging.DEBUG, logger="src.engine.normalizer"):
            normalize("2(3)")

        assert "2*(3)" in caplog.text
