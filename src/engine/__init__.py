"""
Expression engine

Конвейер: normalize → tokenize → parse → evaluate.
"""

from src.engine.evaluator import ExpressionEvaluator
from src.engine.normalizer import normalize
from src.engine.parser import ExpressionParser, parse
from src.engine.pipeline import calculate, evaluate
from src.engine.tokenizer import tokenize

__all__ = [
    # Entry points
    "calculate",
    "evaluate",
    # Stages
    "normalize",
    "tokenize",
    "parse",
    "ExpressionParser",
    "ExpressionEvaluator",
]
