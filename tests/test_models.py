"""
Tests for question models: draft validation and serialization.
"""

from datetime import datetime, timezone

import pytest

from glidru.core.errors import ValidationError
from glidru.core.models import (
    Question,
    QuestionClass,
    QuestionDraft,
    ValueType,
    group_by_class,
)


def make_question(**overrides) -> Question:
    now = datetime(2024, 9, 1, 12, 0, tzinfo=timezone.utc)
    data = {
        "id": "q_1",
        "owner": "alice",
        "shortName": "gpa",
        "class": "Academic",
        "valueType": "INTEGER",
        "prompt": "What is your GPA?",
        "createdAt": now,
        "updatedAt": now,
    }
    data.update(overrides)
    return Question.from_document(data)


# =============================================================================
# Draft Validation
# =============================================================================


class TestQuestionDraft:
    def test_valid_draft(self):
        draft = QuestionDraft.model_validate({
            "shortName": "gpa",
            "class": "Academic",
            "valueType": "INTEGER",
            "prompt": "What is your GPA?",
        })
        valid = draft.validated()

        assert valid.short_name == "gpa"
        assert valid.question_class == QuestionClass.ACADEMIC
        assert valid.value_type == ValueType.INTEGER

    def test_legacy_upper_case_keys(self):
        draft = QuestionDraft.model_validate({
            "SHORT_NAME": "hometown",
            "CLASS": "Geography",
            "VALUE_TYPE": "STRING",
            "PROMPT": "Where did you grow up?",
        })
        valid = draft.validated()

        assert valid.short_name == "hometown"
        assert valid.question_class == QuestionClass.GEOGRAPHY

    def test_whitespace_is_trimmed(self):
        draft = QuestionDraft.model_validate({
            "shortName": "  gpa ",
            "class": "Academic",
            "valueType": "INTEGER",
            "prompt": "  What is your GPA?  ",
        })
        valid = draft.validated()

        assert valid.short_name == "gpa"
        assert valid.prompt == "What is your GPA?"

    def test_missing_fields_are_all_reported(self):
        draft = QuestionDraft.model_validate({"shortName": "gpa"})

        with pytest.raises(ValidationError) as exc_info:
            draft.validated()

        assert exc_info.value.message == "Missing required fields"
        assert set(exc_info.value.missing) == {"class", "prompt", "valueType"}

    def test_blank_prompt_counts_as_missing(self):
        draft = QuestionDraft.model_validate({
            "shortName": "gpa",
            "class": "Academic",
            "valueType": "INTEGER",
            "prompt": "   ",
        })

        with pytest.raises(ValidationError) as exc_info:
            draft.validated()

        assert exc_info.value.missing == ["prompt"]

    @pytest.mark.parametrize("short_name", ["2fast", "has space", "dash-name", "ümlaut"])
    def test_invalid_short_name(self, short_name):
        draft = QuestionDraft.model_validate({
            "shortName": short_name,
            "class": "General",
            "valueType": "STRING",
            "prompt": "Anything",
        })

        with pytest.raises(ValidationError) as exc_info:
            draft.validated()

        assert exc_info.value.message == "Invalid fields"
        assert "shortName" in exc_info.value.invalid

    def test_unknown_class_and_value_type(self):
        draft = QuestionDraft.model_validate({
            "shortName": "gpa",
            "class": "Music",
            "valueType": "FLOAT",
            "prompt": "What is your GPA?",
        })

        with pytest.raises(ValidationError) as exc_info:
            draft.validated()

        assert set(exc_info.value.fields) == {"class", "valueType"}

    def test_server_owned_fields_are_ignored(self):
        draft = QuestionDraft.model_validate({
            "id": "q_forged",
            "owner": "mallory",
            "createdAt": "2001-01-01T00:00:00Z",
            "shortName": "gpa",
            "class": "Academic",
            "valueType": "INTEGER",
            "prompt": "What is your GPA?",
        })

        assert "owner" not in draft.model_dump()
        assert "id" not in draft.model_dump()

    def test_error_body_lists_fields(self):
        draft = QuestionDraft.model_validate({"shortName": "1bad"})

        with pytest.raises(ValidationError) as exc_info:
            draft.validated()

        body = exc_info.value.to_body()
        assert body["error"] == "Missing required fields"
        assert "shortName" in body["fields"]
        assert "class" in body["missing"]


# =============================================================================
# Question
# =============================================================================


class TestQuestion:
    def test_document_uses_wire_keys(self):
        doc = make_question().to_document()

        assert doc["shortName"] == "gpa"
        assert doc["class"] == "Academic"
        assert doc["valueType"] == "INTEGER"
        assert "createdAt" in doc and "updatedAt" in doc

    def test_render_prompt_default_placeholder(self):
        question = make_question(prompt="Why do you want to attend [college_name]?")

        assert question.render_prompt() == "Why do you want to attend [COLLEGE]?"

    def test_render_prompt_with_college(self):
        question = make_question(prompt="Visited [college_name] yet?")

        assert question.render_prompt("Wellesley") == "Visited Wellesley yet?"

    def test_value_type_labels(self):
        assert ValueType.STRING.label == "Short answer"
        assert ValueType.INTEGER.label == "Number"
        assert ValueType.BOOLEAN.label == "Yes/No"


class TestGroupByClass:
    def test_groups_keep_order(self):
        questions = [
            make_question(id="q_1", shortName="gpa"),
            make_question(id="q_2", shortName="hometown", **{"class": "Geography"}),
            make_question(id="q_3", shortName="sat"),
        ]

        grouped = group_by_class(questions)

        assert list(grouped) == ["Academic", "Geography"]
        assert [q.id for q in grouped["Academic"]] == ["q_1", "q_3"]

    def test_empty(self):
        assert group_by_class([]) == {}
