"""
Tokenizer — Лексический анализ канонического выражения

Разбивает каноническое выражение на Token с исходными смещениями.
Идентификаторы сопоставляются по наибольшему совпадению (arcsin раньше sin,
logten раньше log, exp раньше e). Пробелы пропускаются.

Ошибки:
- UNKNOWN_CHARACTER: символ или идентификатор вне алфавита
- MALFORMED_NUMBER: вторая десятичная точка или точка без цифр
"""

from typing import Final

from src.core.domain.result import SyntaxErrorKind, TokenizationError
from src.core.domain.tokens import Constant, FunctionName, Operator, Token, TokenType

NUMBER_CHARACTERS: Final[str] = "0123456789."

OPERATOR_SYMBOLS: Final[dict[str, Operator]] = {op.value: op for op in Operator}

# Идентификатор → (тип, символ); "pi" это ASCII-синоним π
_IDENTIFIERS: Final[dict[str, tuple[TokenType, FunctionName | Constant]]] = {
    **{name.value: (TokenType.FUNCTION, name) for name in FunctionName},
    "pi": (TokenType.CONSTANT, Constant.PI),
    Constant.PI.value: (TokenType.CONSTANT, Constant.PI),
    Constant.E.value: (TokenType.CONSTANT, Constant.E),
}

# Наибольшее совпадение: длинные имена проверяются первыми
_IDENTIFIERS_BY_LENGTH: Final[tuple[str, ...]] = tuple(
    sorted(_IDENTIFIERS, key=len, reverse=True)
)


def _number_end(expression: str, start: int) -> int:
    end = start
    seen_point = False

    while end < len(expression) and expression[end] in NUMBER_CHARACTERS:
        if expression[end] == ".":
            if seen_point:
                raise TokenizationError(
                    SyntaxErrorKind.MALFORMED_NUMBER,
                    end,
                    "Second decimal point in number",
                )
            seen_point = True
        end += 1

    if end - start == 1 and seen_point:
        raise TokenizationError(
            SyntaxErrorKind.MALFORMED_NUMBER,
            start,
            "Decimal point without digits",
        )

    return end


def _match_identifier(expression: str, start: int) -> str | None:
    for name in _IDENTIFIERS_BY_LENGTH:
        if expression.startswith(name, start):
            return name
    return None


def tokenize(expression: str) -> list[Token]:
    """
    Токенизация канонического выражения.

    Args:
        expression: Каноническое выражение (результат normalize)

    Returns:
        Список Token в порядке следования

    Raises:
        TokenizationError: UNKNOWN_CHARACTER / MALFORMED_NUMBER с позицией

    Examples:
        >>> [t.text for t in tokenize("2*sin(pi)")]
        ['2', '*', 'sin', '(', 'pi', ')']
        >>> tokenize("1.2.3")
        Traceback (most recent call last):
        ...
        src.core.domain.result.TokenizationError: Second decimal point in number (position 3)
    """
    tokens: list[Token] = []
    index = 0

    while index < len(expression):
        char = expression[index]

        if char.isspace():
            index += 1
            continue

        if char in NUMBER_CHARACTERS:
            end = _number_end(expression, index)
            tokens.append(Token(TokenType.NUMBER, expression[index:end], index))
            index = end
            continue

        if char in OPERATOR_SYMBOLS:
            tokens.append(Token(TokenType.OPERATOR, char, index, OPERATOR_SYMBOLS[char]))
        elif char == "(":
            tokens.append(Token(TokenType.LEFT_PAREN, char, index))
        elif char == ")":
            tokens.append(Token(TokenType.RIGHT_PAREN, char, index))
        else:
            name = _match_identifier(expression, index)
            if name is None:
                raise TokenizationError(
                    SyntaxErrorKind.UNKNOWN_CHARACTER,
                    index,
                    f"Unknown character {char!r}",
                )
            token_type, symbol = _IDENTIFIERS[name]
            tokens.append(Token(token_type, name, index, symbol))
            index += len(name)
            continue

        index += 1

    return tokens
