"""
Core module - data models, domain errors and shared utilities.

This module contains:
- models: Question, QuestionDraft and their vocabularies
- errors: Domain error taxonomy mapped to HTTP statuses by the API
- utils: Shared utility functions
"""

from glidru.core.models import (
    Question,
    QuestionDraft,
    ValidDraft,
    QuestionClass,
    ValueType,
    group_by_class,
)

from glidru.core.errors import (
    GlidrError,
    ValidationError,
    Conflict,
    NotFound,
    Unauthenticated,
    Forbidden,
    UpstreamFailure,
)

from glidru.core.utils import generate_id, utc_now

__all__ = [
    # Models
    "Question",
    "QuestionDraft",
    "ValidDraft",
    "QuestionClass",
    "ValueType",
    "group_by_class",
    # Errors
    "GlidrError",
    "ValidationError",
    "Conflict",
    "NotFound",
    "Unauthenticated",
    "Forbidden",
    "UpstreamFailure",
    # Utils
    "generate_id",
    "utc_now",
]
