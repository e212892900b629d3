"""
Answer evaluation for practice exercises.

Components:
- normalize_answer / americanize: text normalization
- similarity: Levenshtein-based typo tolerance
- evaluate_locally: local fast-path heuristics
- HttpAnswerJudge: remote semantic judge (language model)
- AnswerEvaluator: facade combining both with graceful fallback
"""

from .evaluator import AnswerEvaluator, build_answer_evaluator
from .judge import AnswerJudge, HttpAnswerJudge, JudgeOutcome, JudgeRequest
from .local import LocalThresholds, evaluate_locally, is_idiom_lesson
from .models import AnswerRecord, Confidence, ExerciseType, Verdict
from .normalization import americanize, normalize_answer
from .similarity import levenshtein_distance, similarity

__all__ = [
    # Types
    "AnswerRecord",
    "Confidence",
    "ExerciseType",
    "Verdict",
    # Local evaluation
    "LocalThresholds",
    "americanize",
    "evaluate_locally",
    "is_idiom_lesson",
    "levenshtein_distance",
    "normalize_answer",
    "similarity",
    # Judge
    "AnswerJudge",
    "HttpAnswerJudge",
    "JudgeOutcome",
    "JudgeRequest",
    # Facade
    "AnswerEvaluator",
    "build_answer_evaluator",
]
