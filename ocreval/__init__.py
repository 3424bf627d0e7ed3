"""OCR evaluation toolkit package."""
from .config import EvalConfig, load_config
from .distance import align, edit_distance
from .metrics import (
    MetricDetails,
    character_error,
    paragraph_f1,
    punctuation_accuracy,
    word_error,
)
from .service import AnalysisResult, EvaluationService

__all__ = [
    "AnalysisResult",
    "EvalConfig",
    "EvaluationService",
    "MetricDetails",
    "align",
    "character_error",
    "edit_distance",
    "load_config",
    "paragraph_f1",
    "punctuation_accuracy",
    "word_error",
]
