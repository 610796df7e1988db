"""
EvaluationResult — Результат вычисления выражения

Immutable Pydantic модель, которую ядро возвращает внешнему слою (клавиатура,
дисплей). Содержит ровно один исход:
- value: конечное decimal-значение
- signal: сигнал вычисления (DIVISION_BY_ZERO / INFINITY / NOT_A_NUMBER)
- syntax_error: ошибка токенизации или разбора с позицией

Сигналы вычисления — это НЕ исключения: это штатные исходы математически
неопределённых операций, их возвращают как значения. Исключения
(TokenizationError, ParseError) используются только внутри конвейера и
конвертируются в syntax_error на границе evaluate().
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class EvaluationSignal(str, Enum):
    """Нештатный, но ожидаемый исход вычисления"""

    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    INFINITY = "INFINITY"
    NOT_A_NUMBER = "NOT_A_NUMBER"


class SyntaxErrorKind(str, Enum):
    """Вид синтаксической ошибки (токенизация + разбор)"""

    # Tokenizer
    UNKNOWN_CHARACTER = "UNKNOWN_CHARACTER"
    MALFORMED_NUMBER = "MALFORMED_NUMBER"

    # Parser
    UNBALANCED_PARENTHESIS = "UNBALANCED_PARENTHESIS"
    MISSING_OPERAND = "MISSING_OPERAND"
    EMPTY_GROUP = "EMPTY_GROUP"
    DANGLING_FUNCTION = "DANGLING_FUNCTION"
    UNEXPECTED_TOKEN = "UNEXPECTED_TOKEN"
    EMPTY_EXPRESSION = "EMPTY_EXPRESSION"
    NESTING_TOO_DEEP = "NESTING_TOO_DEEP"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ExpressionSyntaxError(Exception):
    """
    Базовая синтаксическая ошибка выражения.

    Неустранима в рамках вызова: выражение не может быть вычислено.
    Несёт вид ошибки и позицию (смещение символа в каноническом выражении).
    """

    def __init__(self, kind: SyntaxErrorKind, position: int, message: str):
        super().__init__(f"{message} (position {position})")
        self.kind = kind
        self.position = position
        self.message = message


class TokenizationError(ExpressionSyntaxError):
    """Неизвестный символ или некорректный числовой литерал."""

    pass


class ParseError(ExpressionSyntaxError):
    """Нарушение грамматики: скобки, операнды, функции, глубина вложенности."""

    pass


# =============================================================================
# MODELS
# =============================================================================


class SyntaxFailure(BaseModel):
    """Описание синтаксической ошибки для внешнего слоя"""

    kind: SyntaxErrorKind = Field(..., description="Вид ошибки")
    position: int = Field(..., ge=0, description="Смещение символа в выражении")
    message: str = Field(..., min_length=1, description="Текст ошибки")

    model_config = {"frozen": True}

    @classmethod
    def from_exception(cls, exc: ExpressionSyntaxError) -> "SyntaxFailure":
        return cls(kind=exc.kind, position=exc.position, message=exc.message)


class EvaluationResult(BaseModel):
    """
    Результат evaluate(): ровно одно из value / signal / syntax_error.

    Examples:
        >>> EvaluationResult.success(Decimal("2")).ok
        True
        >>> EvaluationResult.signaled(EvaluationSignal.INFINITY).error
        <EvaluationSignal.INFINITY: 'INFINITY'>
    """

    value: Decimal | None = Field(None, description="Конечный результат")
    signal: EvaluationSignal | None = Field(None, description="Сигнал вычисления")
    syntax_error: SyntaxFailure | None = Field(None, description="Синтаксическая ошибка")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_single_outcome(self) -> "EvaluationResult":
        """Проверка, что заполнен ровно один исход"""
        outcomes = [self.value, self.signal, self.syntax_error]
        populated = sum(1 for outcome in outcomes if outcome is not None)
        if populated != 1:
            raise ValueError(
                f"exactly one of value/signal/syntax_error must be set, got {populated}"
            )
        return self

    @classmethod
    def success(cls, value: Decimal) -> "EvaluationResult":
        return cls(value=value)

    @classmethod
    def signaled(cls, signal: EvaluationSignal) -> "EvaluationResult":
        return cls(signal=signal)

    @classmethod
    def failed(cls, exc: ExpressionSyntaxError) -> "EvaluationResult":
        return cls(syntax_error=SyntaxFailure.from_exception(exc))

    @property
    def ok(self) -> bool:
        """True если получено конечное значение"""
        return self.value is not None

    @property
    def error(self) -> EvaluationSignal | SyntaxFailure | None:
        """Сигнал или синтаксическая ошибка (None для успешного результата)"""
        if self.signal is not None:
            return self.signal
        return self.syntax_error
