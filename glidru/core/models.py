"""
Core data models.

A Question is a prompt a user wants to track across college applications.
Questions are tenant-owned: each belongs to exactly one user (its owner).
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from glidru.core.errors import ValidationError


SHORT_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Token the browser substitutes with the college name at render time
COLLEGE_PLACEHOLDER = "[college_name]"
DEFAULT_COLLEGE_LABEL = "[COLLEGE]"


# =============================================================================
# Enums
# =============================================================================


class QuestionClass(str, Enum):
    """Category a question is grouped under."""

    GENERAL = "General"
    GEOGRAPHY = "Geography"
    ACADEMIC = "Academic"
    SOCCER = "Soccer"


class ValueType(str, Enum):
    """Type of the answer a question expects."""

    STRING = "STRING"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"

    @property
    def label(self) -> str:
        """Friendly name shown next to the prompt."""
        return _VALUE_TYPE_LABELS[self]


_VALUE_TYPE_LABELS = {
    ValueType.STRING: "Short answer",
    ValueType.INTEGER: "Number",
    ValueType.BOOLEAN: "Yes/No",
}


# =============================================================================
# Draft (what callers send)
# =============================================================================


class QuestionDraft(BaseModel):
    """
    Caller-supplied question fields.

    Everything is optional here; presence and shape are checked by
    `validated()` so the caller gets one error naming every bad field.
    Accepts camelCase keys and the upper-case keys older clients send.
    Server-owned fields (id, owner, timestamps) are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    short_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("shortName", "SHORT_NAME", "short_name"),
    )
    question_class: str | None = Field(
        default=None,
        validation_alias=AliasChoices("class", "CLASS", "question_class"),
    )
    value_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("valueType", "VALUE_TYPE", "value_type"),
    )
    prompt: str | None = Field(
        default=None,
        validation_alias=AliasChoices("prompt", "PROMPT"),
    )

    def validated(self) -> "ValidDraft":
        """
        Check required fields and vocabularies.

        Raises ValidationError listing missing and invalid fields.
        """
        missing: list[str] = []
        invalid: dict[str, str] = {}

        question_class = (self.question_class or "").strip()
        short_name = (self.short_name or "").strip()
        prompt = (self.prompt or "").strip()
        value_type = (self.value_type or "").strip()

        if not question_class:
            missing.append("class")
        elif question_class not in _CLASS_VALUES:
            invalid["class"] = f"Class must be one of: {', '.join(_CLASS_VALUES)}"

        if not short_name:
            missing.append("shortName")
        elif not SHORT_NAME_PATTERN.match(short_name):
            invalid["shortName"] = (
                "Short name must be a valid identifier "
                "(letters, numbers, underscores only)"
            )

        if not prompt:
            missing.append("prompt")

        if not value_type:
            missing.append("valueType")
        elif value_type not in _VALUE_TYPE_VALUES:
            invalid["valueType"] = (
                f"Value type must be one of: {', '.join(_VALUE_TYPE_VALUES)}"
            )

        if missing or invalid:
            message = "Missing required fields" if missing else "Invalid fields"
            raise ValidationError(message, missing=missing, invalid=invalid)

        return ValidDraft(
            short_name=short_name,
            question_class=QuestionClass(question_class),
            value_type=ValueType(value_type),
            prompt=prompt,
        )


_CLASS_VALUES = [c.value for c in QuestionClass]
_VALUE_TYPE_VALUES = [v.value for v in ValueType]


class ValidDraft(BaseModel):
    """A draft that passed validation."""

    short_name: str
    question_class: QuestionClass
    value_type: ValueType
    prompt: str


# =============================================================================
# Question (what is stored and returned)
# =============================================================================


class Question(BaseModel):
    """
    A stored question.

    Serialized with camelCase keys and `class` for the category, which is
    also the persisted document layout.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str
    owner: str
    short_name: str
    question_class: QuestionClass = Field(alias="class")
    value_type: ValueType
    prompt: str
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> dict[str, Any]:
        """Serialize for the document store."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Question:
        return cls.model_validate(data)

    def render_prompt(self, college: str | None = None) -> str:
        """Substitute the college placeholder in the prompt."""
        return self.prompt.replace(COLLEGE_PLACEHOLDER, college or DEFAULT_COLLEGE_LABEL)


def group_by_class(questions: list[Question]) -> dict[str, list[Question]]:
    """Group questions by class, keeping their order within each group."""
    grouped: dict[str, list[Question]] = {}
    for question in questions:
        grouped.setdefault(str(question.question_class), []).append(question)
    return grouped
