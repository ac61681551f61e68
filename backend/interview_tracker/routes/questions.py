from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from interview_tracker.core.database import get_db
from interview_tracker.dependencies.auth import get_current_user
from interview_tracker.models.user import User
from interview_tracker.schemas.question import QuestionGenerateIn, QuestionPageOut
from interview_tracker.services.questions import get_question_page

router = APIRouter(prefix="/questions", tags=["questions"], dependencies=[Depends(get_current_user)])


@router.post("/generate", response_model=QuestionPageOut)
def generate_questions(
    payload: QuestionGenerateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = get_question_page(
        db,
        user_id=user.id,
        company=payload.company,
        role=payload.role,
        page=payload.page,
    )
    return asdict(result)
