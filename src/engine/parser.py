"""
Parser — Рекурсивный спуск по грамматике выражения

Грамматика (от слабого связывания к сильному):

    expression := term (("+" | "-") term)*
    term       := power (("*" | "/" | "#") power)*
    power      := unary ("^" power)?
    unary      := ("+" | "-") unary | primary
    primary    := NUMBER | CONSTANT | FUNCTION "(" expression ")" | "(" expression ")"

СЛЕДСТВИЯ:
1. + - * / # левоассоциативны: 8-3-2 = 3, 8/4/2 = 1
2. ^ правоассоциативен: 2^3^2 = 2^9
3. Унарный минус связывает сильнее ^: -2^2 = (-2)^2 = 4
4. Функция связывает сильнее всего: sin(x)^2 = (sin x)^2

Каждая скобка, вызов функции, унарный оператор и правая часть ^
увеличивают глубину; выше max_depth → NESTING_TOO_DEEP.
"""

from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

from src.core.domain.context import DEFAULT_MAX_DEPTH, DEFAULT_PRECISION, GUARD_DIGITS
from src.core.domain.expression import BinaryOp, FunctionCall, Literal, Node, UnaryOp
from src.core.domain.result import ParseError, SyntaxErrorKind
from src.core.domain.tokens import Operator, Token, TokenType
from src.core.math.transcendental import constant_value

ADDITIVE_OPERATORS = (Operator.PLUS, Operator.MINUS)
MULTIPLICATIVE_OPERATORS = (Operator.MULTIPLY, Operator.DIVIDE, Operator.MODULO)


class ExpressionParser:
    """
    Парсер одной последовательности токенов.

    Экземпляр одноразовый: хранит курсор и текущую глубину.

    Args:
        tokens: Результат tokenize()
        constant_digits: Число цифр для значений π и e
        max_depth: Максимальная глубина вложенности
    """

    def __init__(
        self,
        tokens: list[Token],
        constant_digits: int = DEFAULT_PRECISION + GUARD_DIGITS,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self._tokens = tokens
        self._constant_digits = constant_digits
        self._max_depth = max_depth
        self._index = 0
        self._depth = 0

    # -------------------------------------------------------------------------
    # Cursor
    # -------------------------------------------------------------------------

    def _peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _end_position(self) -> int:
        if not self._tokens:
            return 0
        last = self._tokens[-1]
        return last.position + len(last.text)

    @contextmanager
    def _nested(self, token: Token) -> Iterator[None]:
        self._depth += 1
        if self._depth > self._max_depth:
            raise ParseError(
                SyntaxErrorKind.NESTING_TOO_DEEP,
                token.position,
                f"Expression nesting exceeds {self._max_depth} levels",
            )
        try:
            yield
        finally:
            self._depth -= 1

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------

    def parse(self) -> Node:
        """
        Разбор всей последовательности.

        Raises:
            ParseError: Любое нарушение грамматики, с позицией токена
        """
        if not self._tokens:
            raise ParseError(SyntaxErrorKind.EMPTY_EXPRESSION, 0, "Expression is empty")

        node = self._expression()

        token = self._peek()
        if token is not None:
            if token.type == TokenType.RIGHT_PAREN:
                raise ParseError(
                    SyntaxErrorKind.UNBALANCED_PARENTHESIS,
                    token.position,
                    "Unmatched ')'",
                )
            raise ParseError(
                SyntaxErrorKind.UNEXPECTED_TOKEN,
                token.position,
                f"Unexpected {token.text!r}",
            )

        return node

    def _expression(self) -> Node:
        node = self._term()
        while True:
            token = self._peek()
            if token is None or not token.is_operator(*ADDITIVE_OPERATORS):
                return node
            self._advance()
            node = BinaryOp(token.symbol, node, self._term())

    def _term(self) -> Node:
        node = self._power()
        while True:
            token = self._peek()
            if token is None or not token.is_operator(*MULTIPLICATIVE_OPERATORS):
                return node
            self._advance()
            node = BinaryOp(token.symbol, node, self._power())

    def _power(self) -> Node:
        base = self._unary()

        token = self._peek()
        if token is None or not token.is_operator(Operator.POWER):
            return base

        self._advance()
        with self._nested(token):
            exponent = self._power()
        return BinaryOp(Operator.POWER, base, exponent)

    def _unary(self) -> Node:
        token = self._peek()
        if token is None or not token.is_operator(*ADDITIVE_OPERATORS):
            return self._primary()

        self._advance()
        with self._nested(token):
            operand = self._unary()
        return UnaryOp(token.symbol, operand)

    def _primary(self) -> Node:
        token = self._peek()

        if token is None:
            raise ParseError(
                SyntaxErrorKind.MISSING_OPERAND,
                self._end_position(),
                "Expression ends where an operand is expected",
            )

        if token.type == TokenType.NUMBER:
            self._advance()
            return Literal(Decimal(token.text))

        if token.type == TokenType.CONSTANT:
            self._advance()
            return Literal(constant_value(token.symbol, self._constant_digits))

        if token.type == TokenType.FUNCTION:
            self._advance()
            following = self._peek()
            if following is None or following.type != TokenType.LEFT_PAREN:
                raise ParseError(
                    SyntaxErrorKind.DANGLING_FUNCTION,
                    token.position,
                    f"Function {token.text!r} is not followed by '('",
                )
            with self._nested(token):
                argument = self._group()
            return FunctionCall(token.symbol, argument)

        if token.type == TokenType.LEFT_PAREN:
            with self._nested(token):
                return self._group()

        raise ParseError(
            SyntaxErrorKind.MISSING_OPERAND,
            token.position,
            f"Operand expected before {token.text!r}",
        )

    def _group(self) -> Node:
        opening = self._advance()

        following = self._peek()
        if following is not None and following.type == TokenType.RIGHT_PAREN:
            raise ParseError(
                SyntaxErrorKind.EMPTY_GROUP,
                opening.position,
                "Empty parentheses",
            )

        node = self._expression()

        closing = self._peek()
        if closing is None:
            raise ParseError(
                SyntaxErrorKind.UNBALANCED_PARENTHESIS,
                opening.position,
                "Missing ')' for '('",
            )
        if closing.type != TokenType.RIGHT_PAREN:
            raise ParseError(
                SyntaxErrorKind.UNEXPECTED_TOKEN,
                closing.position,
                f"Unexpected {closing.text!r}",
            )

        self._advance()
        return node


def parse(
    tokens: list[Token],
    constant_digits: int = DEFAULT_PRECISION + GUARD_DIGITS,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Node:
    """
    Построение дерева выражения из токенов.

    Examples:
        >>> from src.engine.tokenizer import tokenize
        >>> parse(tokenize("-2^2"))
        BinaryOp(operator=<Operator.POWER: '^'>, left=UnaryOp(operator=<Operator.MINUS: '-'>, operand=Literal(value=Decimal('2'))), right=Literal(value=Decimal('2')))
    """
    return ExpressionParser(tokens, constant_digits, max_depth).parse()
