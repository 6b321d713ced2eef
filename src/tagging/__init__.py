"""
Auto-tagging package: assigns taxonomy categories to transcribed clips.

Modules:
    classifier: OpenAI chat classifier and strict answer validation
    auto_tag: Candidate selection, tagging loop and batch wrapper
"""

from .auto_tag import (
    AutoTagSummary,
    auto_tag_all,
    auto_tag_clips,
    match_categories,
    select_tagging_candidates,
    tag_clip,
)
from .classifier import OpenAIClassifier, parse_category_names

__all__ = [
    "AutoTagSummary",
    "auto_tag_all",
    "auto_tag_clips",
    "match_categories",
    "select_tagging_candidates",
    "tag_clip",
    "OpenAIClassifier",
    "parse_category_names",
]
