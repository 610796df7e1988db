"""
Engine settings — значения по умолчанию для контекста вычисления.

Читаются из переменных окружения с префиксом CALC_ (и из .env файла):
    CALC_PRECISION=50
    CALC_ANGLE_MODE=degrees
    CALC_MAX_DEPTH=80
    CALC_MAX_MAGNITUDE=1E+1000
    CALC_MAX_FACTORIAL_OPERAND=5000
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.domain.context import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FACTORIAL_OPERAND,
    DEFAULT_PRECISION,
    DOUBLE_MAX_MAGNITUDE,
    MAX_DEPTH_LIMIT,
    MAX_PRECISION,
    AngleMode,
)


class EngineSettings(BaseSettings):
    """Load from env (and .env file)."""

    precision: int = Field(DEFAULT_PRECISION, ge=1, le=MAX_PRECISION)
    angle_mode: AngleMode = AngleMode.RADIANS

    # Resource bounds
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_LIMIT)
    max_magnitude: Decimal = Field(DOUBLE_MAX_MAGNITUDE, gt=0)
    max_factorial_operand: int = Field(DEFAULT_MAX_FACTORIAL_OPERAND, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="CALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    return EngineSettings()
