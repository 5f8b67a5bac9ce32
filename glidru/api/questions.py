"""
Question routes.

Every route works on the caller's own questions; the owner always comes
from the verified token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from glidru.auth import Principal, optional_auth, require_auth
from glidru.core.models import (
    Question,
    QuestionClass,
    QuestionDraft,
    ValueType,
    group_by_class,
)
from glidru.services.questions import QuestionStore

router = APIRouter(prefix="/questions", tags=["questions"])


def get_question_store(request: Request) -> QuestionStore:
    return request.app.state.questions


@router.get("/vocabulary")
async def get_vocabulary(
    principal: Principal | None = Depends(optional_auth()),
):
    """
    Classes and value types a question may use.

    Public; a signed-in caller also gets their roles back so the client
    can decide which features to show.
    """
    return {
        "classes": [c.value for c in QuestionClass],
        "valueTypes": [{"value": v.value, "label": v.label} for v in ValueType],
        "roles": sorted(principal.roles) if principal else [],
    }


@router.get("", response_model=list[Question])
async def list_questions(
    question_class: QuestionClass | None = Query(default=None, alias="class"),
    principal: Principal = Depends(require_auth()),
    store: QuestionStore = Depends(get_question_store),
):
    """List the caller's questions, newest first."""
    return await store.list(principal.uid, question_class=question_class)


@router.get("/grouped")
async def list_questions_grouped(
    college: str | None = Query(default=None),
    principal: Principal = Depends(require_auth()),
    store: QuestionStore = Depends(get_question_store),
):
    """
    The caller's questions grouped by class, newest first within a group.

    Each question carries `renderedPrompt`, the prompt with the college
    placeholder filled in (`[COLLEGE]` when no `college` is given).
    """
    grouped = group_by_class(await store.list(principal.uid))
    return {
        question_class: [
            {
                **question.model_dump(mode="json", by_alias=True),
                "renderedPrompt": question.render_prompt(college),
            }
            for question in questions
        ]
        for question_class, questions in grouped.items()
    }


@router.get("/{question_id}", response_model=Question)
async def get_question(
    question_id: str,
    principal: Principal = Depends(require_auth()),
    store: QuestionStore = Depends(get_question_store),
):
    """Get one of the caller's questions."""
    return await store.get(principal.uid, question_id)


@router.post("", response_model=Question, status_code=201)
async def create_question(
    draft: QuestionDraft,
    principal: Principal = Depends(require_auth()),
    store: QuestionStore = Depends(get_question_store),
):
    """Create a question."""
    return await store.create(principal.uid, draft)


@router.put("/{question_id}", response_model=Question)
async def update_question(
    question_id: str,
    draft: QuestionDraft,
    principal: Principal = Depends(require_auth()),
    store: QuestionStore = Depends(get_question_store),
):
    """Replace a question's fields."""
    return await store.update(principal.uid, question_id, draft)


@router.delete("/{question_id}")
async def delete_question(
    question_id: str,
    principal: Principal = Depends(require_auth()),
    store: QuestionStore = Depends(get_question_store),
):
    """Delete a question."""
    await store.delete(principal.uid, question_id)
    return {"message": "Question deleted successfully"}
