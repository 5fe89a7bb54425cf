"""Evaluators package for SWAT readiness scoring."""

from .classifier import classify, classify_category, normalize_category_name, ordered_categories
from .resolver import QuestionResolver, resolve_questions, sample_fallback_questions
from .completion import compute_completion
from .progress import category_progress, overall_progress, reconcile_progress
from .sections import build_sections, format_response_value
from .scoring import compute_tier_score, generate_report_filename, generate_report_summary

__all__ = [
    "classify",
    "classify_category",
    "normalize_category_name",
    "ordered_categories",
    "QuestionResolver",
    "resolve_questions",
    "sample_fallback_questions",
    "compute_completion",
    "category_progress",
    "overall_progress",
    "reconcile_progress",
    "build_sections",
    "format_response_value",
    "compute_tier_score",
    "generate_report_filename",
    "generate_report_summary",
]
