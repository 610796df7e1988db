"""
EvaluationContext — Контекст вычисления

Immutable Pydantic модель, передаваемая через всё вычисление:
- angle_mode: единицы углов для тригонометрии (degrees / radians)
- precision: число значащих десятичных цифр результата
- max_depth / max_magnitude / max_factorial_operand: ограничения ресурсов

Внутренние вычисления ведутся с working_precision = precision + GUARD_DIGITS,
результат округляется до precision.
"""

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from src.core.config import EngineSettings


# =============================================================================
# ПАРАМЕТРЫ ПО УМОЛЧАНИЮ
# =============================================================================

# Значащие цифры результата. Достаточно для точного 2^256 (78 цифр)
DEFAULT_PRECISION: Final[int] = 100

# Верхняя граница precision (стоимость mpmath/decimal растёт сверхлинейно)
MAX_PRECISION: Final[int] = 10_000

# Запасные цифры для промежуточных вычислений
GUARD_DIGITS: Final[int] = 10

# Максимальная глубина вложенности (скобки, функции, унарные операторы, ^)
DEFAULT_MAX_DEPTH: Final[int] = 100

# Абсолютный потолок глубины: выше не позволяет стек интерпретатора
MAX_DEPTH_LIMIT: Final[int] = 120

# Наибольший конечный IEEE-754 double: диапазон слоя отображения.
# Всё, что больше по модулю, сигнализируется как INFINITY
DOUBLE_MAX_MAGNITUDE: Final[Decimal] = Decimal("1.7976931348623157E+308")

# Максимальный аргумент факториала, который ещё вычисляется
DEFAULT_MAX_FACTORIAL_OPERAND: Final[int] = 10_000


# =============================================================================
# ENUMS
# =============================================================================


class AngleMode(str, Enum):
    """Единицы углов для тригонометрических функций"""

    DEGREES = "degrees"
    RADIANS = "radians"


# =============================================================================
# CONTEXT MODEL
# =============================================================================


class EvaluationContext(BaseModel):
    """
    Контекст вычисления выражения.

    Не изменяется во время вычисления; каждый вызов evaluate() получает
    собственный экземпляр (или разделяет immutable экземпляр).
    """

    angle_mode: AngleMode = Field(AngleMode.RADIANS, description="Единицы углов")
    precision: int = Field(
        DEFAULT_PRECISION,
        ge=1,
        le=MAX_PRECISION,
        description="Значащие цифры результата",
    )
    max_depth: int = Field(
        DEFAULT_MAX_DEPTH,
        ge=1,
        le=MAX_DEPTH_LIMIT,
        description="Максимальная глубина вложенности выражения",
    )
    max_magnitude: Decimal = Field(
        DOUBLE_MAX_MAGNITUDE,
        gt=0,
        description="Порог модуля, выше которого результат считается бесконечным",
    )
    max_factorial_operand: int = Field(
        DEFAULT_MAX_FACTORIAL_OPERAND,
        ge=0,
        description="Максимальный аргумент факториала",
    )

    model_config = {"frozen": True}

    @field_validator("max_magnitude")
    @classmethod
    def validate_max_magnitude_finite(cls, v: Decimal) -> Decimal:
        """Порог должен быть конечным числом"""
        if not v.is_finite():
            raise ValueError(f"max_magnitude must be finite, got {v}")
        return v

    @property
    def working_precision(self) -> int:
        """Точность промежуточных вычислений"""
        return self.precision + GUARD_DIGITS

    @classmethod
    def from_settings(
        cls,
        settings: "EngineSettings",
        angle_mode: AngleMode | None = None,
        precision: int | None = None,
    ) -> "EvaluationContext":
        """
        Построение контекста из настроек движка с опциональными переопределениями.

        Args:
            settings: Настройки движка (EngineSettings)
            angle_mode: Переопределение единиц углов
            precision: Переопределение точности

        Returns:
            EvaluationContext
        """
        return cls(
            angle_mode=angle_mode if angle_mode is not None else settings.angle_mode,
            precision=precision if precision is not None else settings.precision,
            max_depth=settings.max_depth,
            max_magnitude=settings.max_magnitude,
            max_factorial_operand=settings.max_factorial_operand,
        )
