"""
Normalizer — Канонизация пользовательского ввода

Строка, набранная на клавиатуре калькулятора (локальные разделители,
глифы × ÷ √ π ! %, пропущенные знаки умножения), переписывается в
каноническое выражение, которое токенизатор и парсер читают однозначно.

Проходы (фиксированный порядок, каждый — чистая функция str → str):
1. substitute_symbols          × ÷ − → * / -, разделители, log → logten
2. insert_implicit_multiplication   2(3) → 2*(3), 2π → 2*π, 3!2 → 3!*2
3. rewrite_square_roots         √X → sqrt(X)
4. rewrite_factorials           X! → factorial(X)
5. rewrite_percentages          A+B% → (A)+(A)*(B/100), B% → (B/100)
6. balance_parentheses          недостающие ")" дописываются в конец

Каждый проход — один итеративный просмотр строки с буфером, без рекурсии.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. normalize() никогда не падает: корректность проверяет парсер
2. normalize(normalize(s)) == normalize(s)
3. Лишние ")" не удаляются, недостающие "(" не добавляются
"""

import logging
import re
from typing import Final

from src.core.domain.tokens import Constant, FunctionName

logger = logging.getLogger(__name__)


# =============================================================================
# КЛАССЫ СИМВОЛОВ
# =============================================================================

DIGITS: Final[str] = "0123456789."

BINARY_OPERATORS: Final[str] = "+-*/^#"

# Символы, которыми может заканчиваться операнд перед неявным умножением
OPERAND_ENDINGS: Final[str] = DIGITS + ")!π"

# После этих символов √ начинает новый операнд без умножения
SQRT_PREFIXES: Final[str] = BINARY_OPERATORS + "(√"

# Буквенные имена констант; π обрабатывается как символ
CONSTANT_NAMES: Final[tuple[str, ...]] = (Constant.E.value, "pi")

# Идентификатор целиком (наибольшее совпадение) или один символ
_IDENTIFIER_NAMES: Final[list[str]] = sorted(
    [*(name.value for name in FunctionName), *CONSTANT_NAMES], key=len, reverse=True
)
_UNIT_PATTERN: Final[re.Pattern[str]] = re.compile(
    "|".join(re.escape(name) for name in _IDENTIFIER_NAMES)
    + r"|.",
    re.DOTALL,
)

SYMBOL_SUBSTITUTIONS: Final[dict[str, str]] = {
    "×": "*",
    "÷": "/",
    "−": "-",
}

# log → logten, но не logten → logtenten
_LOG_PATTERN: Final[re.Pattern[str]] = re.compile(r"log(?!ten)")


# =============================================================================
# ENTRY POINT
# =============================================================================


def normalize(
    raw: str,
    decimal_separator: str = ".",
    grouping_separator: str = ",",
) -> str:
    """
    Канонизация ввода с клавиатуры.

    Args:
        raw: Строка ввода, например "2√9×10%"
        decimal_separator: Локальный десятичный разделитель
        grouping_separator: Локальный разделитель разрядов

    Returns:
        Каноническое выражение

    Examples:
        >>> normalize("2(3+4)")
        '2*(3+4)'
        >>> normalize("√9×(3!")
        'sqrt(9)*(factorial(3))'
        >>> normalize("1.234,5×2", decimal_separator=",", grouping_separator=".")
        '1234.5*2'
    """
    expression = substitute_symbols(raw, decimal_separator, grouping_separator)
    expression = insert_implicit_multiplication(expression)
    expression = rewrite_square_roots(expression)
    expression = rewrite_factorials(expression)
    expression = rewrite_percentages(expression)
    expression = balance_parentheses(expression)

    logger.debug("Normalized %r -> %r", raw, expression)
    return expression


# =============================================================================
# 1. SYMBOL SUBSTITUTION
# =============================================================================


def substitute_symbols(
    expression: str,
    decimal_separator: str = ".",
    grouping_separator: str = ",",
) -> str:
    """
    Замена глифов дисплея и локальных разделителей.

    Пробелы удаляются (включая неразрывные, которые некоторые локали
    используют как разделитель разрядов). % остаётся для прохода процентов.
    """
    expression = "".join(expression.split())

    for glyph, replacement in SYMBOL_SUBSTITUTIONS.items():
        expression = expression.replace(glyph, replacement)

    if grouping_separator and grouping_separator != decimal_separator:
        expression = expression.replace(grouping_separator, "")
    if decimal_separator and decimal_separator != ".":
        expression = expression.replace(decimal_separator, ".")

    return _LOG_PATTERN.sub("logten", expression)


# =============================================================================
# 2. IMPLICIT MULTIPLICATION
# =============================================================================


def _ends_operand(unit: str) -> bool:
    return unit in CONSTANT_NAMES or unit[-1] in OPERAND_ENDINGS


def _needs_multiplication(previous: str, current: str) -> bool:
    if current == "(" or current == "π":
        return _ends_operand(previous)
    if current in DIGITS:
        return previous in CONSTANT_NAMES or previous[-1] in ")!π"
    if current == "√":
        return previous[-1] not in SQRT_PREFIXES
    if current[0].isalpha():
        # начало идентификатора: 2sin(30), 2e
        return _ends_operand(previous)
    return False


def insert_implicit_multiplication(expression: str) -> str:
    """
    Вставка пропущенных "*" за один проход.

    Известные идентификаторы (sin, exp, pi, e, ...) рассматриваются
    целиком, поэтому константа e не путается с началом exp.

    Examples:
        >>> insert_implicit_multiplication("2(3)4")
        '2*(3)*4'
        >>> insert_implicit_multiplication("2π√4")
        '2*π*√4'
        >>> insert_implicit_multiplication("e(2)exp(1)")
        'e*(2)*exp(1)'
    """
    buffer: list[str] = []

    for unit in _UNIT_PATTERN.findall(expression):
        if buffer and _needs_multiplication(buffer[-1], unit):
            buffer.append("*")
        buffer.append(unit)

    return "".join(buffer)


# =============================================================================
# 3. SQUARE ROOTS
# =============================================================================


def _close_square_roots(buffer: list[str], pending: list[int], depth: int) -> int:
    """Закрытие sqrt(, открытых на текущей глубине скобок."""
    while pending and pending[-1] == depth:
        pending.pop()
        buffer.append(")")
        depth -= 1
    return depth


def rewrite_square_roots(expression: str) -> str:
    """
    √X → sqrt(X).

    Операнд √ продолжается до первого оператора + - * / ^ # или
    непарной ")" на его глубине скобок (либо до конца строки). Знак
    сразу после √ принадлежит операнду: √-4 → sqrt(-4). Уже заключённый
    в скобки операнд не оборачивается повторно.

    Examples:
        >>> rewrite_square_roots("√2^2")
        'sqrt(2)^2'
        >>> rewrite_square_roots("√√16")
        'sqrt(sqrt(16))'
        >>> rewrite_square_roots("√(2^1024)")
        'sqrt(2^1024)'
    """
    if "√" not in expression:
        return expression

    buffer: list[str] = []
    # Глубина скобок, на которой закрывается каждый открытый sqrt(
    pending: list[int] = []
    depth = 0
    index = 0

    while index < len(expression):
        char = expression[index]
        index += 1

        if char == "√":
            if expression.startswith("(", index):
                buffer.append("sqrt")
                continue
            buffer.append("sqrt(")
            depth += 1
            pending.append(depth)
            if expression[index : index + 1] in ("+", "-"):
                buffer.append(expression[index])
                index += 1
        elif char == "(":
            buffer.append(char)
            depth += 1
        elif char == ")":
            depth = _close_square_roots(buffer, pending, depth)
            buffer.append(char)
            depth -= 1
        elif char in BINARY_OPERATORS:
            depth = _close_square_roots(buffer, pending, depth)
            buffer.append(char)
        else:
            buffer.append(char)

    buffer.append(")" * len(pending))
    return "".join(buffer)


# =============================================================================
# 4. FACTORIALS
# =============================================================================


def _operand_start(buffer: list[str], floor: int = 0) -> int:
    """
    Начало операнда, который заканчивается в конце буфера.

    Операнд — число / константа, либо группа в скобках вместе с именем
    функции перед ней (sin(30)). Поиск не заходит левее floor.
    """
    index = len(buffer)

    if index > floor and buffer[index - 1] == ")":
        depth = 0
        while index > floor:
            index -= 1
            if buffer[index] == ")":
                depth += 1
            elif buffer[index] == "(":
                depth -= 1
                if depth == 0:
                    break
        while index > floor and buffer[index - 1].isascii() and buffer[index - 1].isalpha():
            index -= 1
        return index

    while index > floor and (buffer[index - 1] in DIGITS or buffer[index - 1].isalpha()):
        index -= 1
    return index


def _strip_enclosing_parentheses(operand: str) -> str:
    if not (operand.startswith("(") and operand.endswith(")")):
        return operand

    depth = 0
    for index, char in enumerate(operand):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index < len(operand) - 1:
                # "(1)*(2)": первая скобка закрывается раньше конца
                return operand

    return operand[1:-1]


def rewrite_factorials(expression: str) -> str:
    """
    X! → factorial(X), вложенные факториалы изнутри наружу.

    Examples:
        >>> rewrite_factorials("(3!)!")
        'factorial(factorial(3))'
        >>> rewrite_factorials("5!+sin(30)!")
        'factorial(5)+factorial(sin(30))'
    """
    if "!" not in expression:
        return expression

    buffer: list[str] = []

    for char in expression:
        if char != "!":
            buffer.append(char)
            continue

        start = _operand_start(buffer)
        operand = _strip_enclosing_parentheses("".join(buffer[start:]))
        del buffer[start:]
        buffer.extend(f"factorial({operand})")

    return "".join(buffer)


# =============================================================================
# 5. PERCENTAGES
# =============================================================================


def rewrite_percentages(expression: str) -> str:
    """
    Проценты в "бытовом" смысле калькулятора.

    - L+X% и L-X%: X процентов от L → (L)+(L)*(X/100)
      (L — вся левая часть в пределах текущих скобок)
    - X% в остальных позициях → (X/100)
    - % перед числом, "(" или идентификатором получает неявное "*"

    Examples:
        >>> rewrite_percentages("50+20%")
        '(50)+(50)*(20/100)'
        >>> rewrite_percentages("900/10%")
        '900/(10/100)'
        >>> rewrite_percentages("10%10%")
        '(10/100)*(10/100)'
    """
    if "%" not in expression:
        return expression

    buffer: list[str] = []
    group_starts = [0]

    for index, char in enumerate(expression):
        if char == "(":
            buffer.append(char)
            group_starts.append(len(buffer))
            continue

        if char == ")":
            buffer.append(char)
            if len(group_starts) > 1:
                group_starts.pop()
            continue

        if char != "%":
            buffer.append(char)
            continue

        group_start = group_starts[-1]
        start = _operand_start(buffer, group_start)
        percent = f"({''.join(buffer[start:])}/100)"
        operator_index = start - 1

        if (
            operator_index > group_start
            and buffer[operator_index] in "+-"
            and buffer[operator_index - 1] not in BINARY_OPERATORS
        ):
            left = "".join(buffer[group_start:operator_index])
            sign = buffer[operator_index]
            del buffer[group_start:]
            buffer.extend(f"({left}){sign}({left})*{percent}")
        else:
            del buffer[start:]
            buffer.extend(percent)

        following = expression[index + 1 : index + 2]
        if following and (following in DIGITS or following in "(√" or following.isalpha()):
            buffer.append("*")

    return "".join(buffer)


# =============================================================================
# 6. PARENTHESES
# =============================================================================


def balance_parentheses(expression: str) -> str:
    """
    Дописывание недостающих ")" в конец.

    Examples:
        >>> balance_parentheses("sin(cos(0")
        'sin(cos(0))'
        >>> balance_parentheses("2)")
        '2)'
    """
    missing = expression.count("(") - expression.count(")")
    if missing > 0:
        return expression + ")" * missing
    return expression
