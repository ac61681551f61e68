from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy import asc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from interview_tracker.core.config import settings
from interview_tracker.models.interview_question import InterviewQuestion
from interview_tracker.services.json_extract import parse_json_array_with_fallback
from interview_tracker.services.openai_client import OpenAIClient, OpenAIClientError

logger = logging.getLogger(__name__)

QUESTION_TYPES = frozenset({"technical", "behavioral", "company-specific", "leadership", "project-based", "general"})

SYSTEM_PROMPT = (
    "You are an expert interview coach. You MUST respond with ONLY a valid JSON array. "
    "No markdown, no explanations, no code blocks - just pure JSON array starting with [ and ending with ]."
)


@dataclass(frozen=True)
class GeneratedQuestion:
    question: str
    answer: str
    example: str | None = None
    type: str = "general"
    id: int | None = None


@dataclass(frozen=True)
class QuestionPage:
    questions: list[GeneratedQuestion]
    page: int
    has_more: bool
    from_cache: bool
    fallback: bool = False


def build_questions_prompt(company: str, role: str, *, avoid: list[str] | None = None) -> str:
    prompt = f"""You are an expert interviewer creating realistic interview questions for a {role} position at {company}.

REQUIREMENTS:
1. Generate exactly 10 unique, challenging interview questions
2. Tailor questions to {company}'s business, products, culture and technologies
3. Tailor questions to the requirements of the {role} role

Question Distribution:
- 4 technical questions (role-specific technical challenges)
- 2 behavioral questions (teamwork, problem-solving, growth mindset)
- 2 company-specific questions ({company}'s products, values, challenges)
- 1 leadership/management question
- 1 project-based question (real-world application)

For each question provide:
- question: The interview question
- answer: Detailed sample answer (200-300 words) with specific examples
- example: Practical scenario or project example (75-100 words)
- type: One of: technical, behavioral, company-specific, leadership, project-based

Format exactly like this:
[
  {{
    "question": "How would you approach [specific challenge] at {company}?",
    "answer": "Detailed answer with {company} context...",
    "example": "In a previous role, I...",
    "type": "company-specific"
  }}
]

Return ONLY the JSON array, no other text."""
    if avoid:
        listed = "\n".join(f"- {q}" for q in avoid)
        prompt += f"\n\nDo not repeat any of these questions:\n{listed}"
    return prompt


def fallback_questions(company: str, role: str) -> list[GeneratedQuestion]:
    """Fixed set of five questions used whenever generation or parsing fails."""
    return [
        GeneratedQuestion(
            question=(
                f"How would you contribute to {company}'s mission and what specific skills make you "
                f"a good fit for this {role} position?"
            ),
            answer=(
                f"Research {company}'s mission, values, and recent projects. Highlight how your skills, "
                "experience, and values align with their goals, and mention technologies or methods you have "
                "used that are relevant to their work."
            ),
            example=(
                f"\"I've followed {company}'s work in [specific area]. In my previous role I [specific "
                "achievement] using [relevant technology], which relates directly to the challenges "
                f"{company} faces.\""
            ),
            type="company-specific",
        ),
        GeneratedQuestion(
            question=(
                "Tell me about a time when you had to learn a new technology quickly to meet a deadline. "
                f"How do you stay current with industry trends relevant to {company}?"
            ),
            answer=(
                "Describe the situation, your learning strategy and resources, and how you applied what you "
                "learned. Mention how you keep up with the industry through blogs, courses, or communities."
            ),
            example=(
                "\"When our team migrated to [technology], I built a proof of concept within a week and then "
                "helped train the rest of the team.\""
            ),
            type="behavioral",
        ),
        GeneratedQuestion(
            question=(
                f"How would you handle working in a team environment at {company}, and what is your "
                "experience with collaboration tools and methodologies?"
            ),
            answer=(
                "Discuss team structures you have worked in, methodologies such as Agile or Scrum, and examples "
                "of cross-functional collaboration, conflict resolution, and knowledge sharing."
            ),
            example=(
                "\"I worked in a cross-functional team using Scrum and delivered [project] together with "
                "design and product.\""
            ),
            type="behavioral",
        ),
        GeneratedQuestion(
            question=(
                f"What projects or initiatives at {company} interest you most, and how would you contribute "
                f"to them as a {role}?"
            ),
            answer=(
                f"Pick recent {company} projects that match the role, explain why they interest you, and show "
                "how your skills would add value from day one."
            ),
            example=(
                f"\"I'm particularly interested in {company}'s [initiative]. With my experience in [skill] I "
                "could help by [specific contribution].\""
            ),
            type="project-based",
        ),
        GeneratedQuestion(
            question=(
                f"Describe your leadership style and how you would mentor junior team members in a {role} "
                f"position at {company}."
            ),
            answer=(
                "Explain how you share knowledge, give constructive feedback, adapt to different learning "
                "styles, and create growth opportunities for others."
            ),
            example=(
                "\"I mentor through pair programming, code reviews, and regular one-on-ones, gradually "
                "increasing responsibility.\""
            ),
            type="leadership",
        ),
    ]


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def normalize_questions(items: list[Any], company: str, role: str) -> list[GeneratedQuestion]:
    """Fill in missing fields the way a reviewer would rather than dropping partial items."""
    out: list[GeneratedQuestion] = []
    for index, item in enumerate(items):
        if isinstance(item, str):
            item = {"question": item}
        if not isinstance(item, dict):
            continue
        q_type = (_clean(item.get("type")) or "general").lower()
        out.append(
            GeneratedQuestion(
                question=_clean(item.get("question"))
                or f"What interests you most about working as a {role} at {company}? (Question {index + 1})",
                answer=_clean(item.get("answer"))
                or (
                    f"Discuss your passion for the role and company values. Research {company}'s mission "
                    "and explain how your skills align with their goals."
                ),
                example=_clean(item.get("example"))
                or f"Provide a specific example from your experience that demonstrates relevant skills for {company}.",
                type=q_type if q_type in QUESTION_TYPES else "general",
            )
        )
    return out


def _cached_questions(db: Session, user_id: int, company: str, role: str) -> list[InterviewQuestion]:
    return (
        db.query(InterviewQuestion)
        .filter(
            InterviewQuestion.user_id == user_id,
            InterviewQuestion.company == company,
            InterviewQuestion.role == role,
        )
        .order_by(asc(InterviewQuestion.created_at), asc(InterviewQuestion.id))
        .all()
    )


def _to_generated(row: InterviewQuestion) -> GeneratedQuestion:
    return GeneratedQuestion(
        id=row.id,
        question=row.question,
        answer=row.answer,
        example=row.example,
        type=row.type or "general",
    )


def generate_questions(
    company: str,
    role: str,
    *,
    avoid: list[str] | None = None,
    client_factory: Callable[[], OpenAIClient] | None = None,
) -> tuple[list[GeneratedQuestion], bool]:
    """
    Ask the model for questions. Returns (questions, used_fallback); never raises and never
    returns an empty list.
    """
    factory = client_factory or OpenAIClient
    try:
        client = factory()
        response = client.chat_completion(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_questions_prompt(company, role, avoid=avoid)},
            ],
            temperature=settings.AI_QUESTIONS_TEMPERATURE,
            max_tokens=settings.AI_QUESTIONS_MAX_TOKENS,
        )
    except OpenAIClientError:
        logger.exception("Question generation failed for company=%r role=%r; using fallback", company, role)
        return fallback_questions(company, role), True

    items, used_fallback = parse_json_array_with_fallback(
        response.message,
        lambda: fallback_questions(company, role),
    )
    if used_fallback:
        return items, True

    questions = normalize_questions(items, company, role)
    if not questions:
        logger.warning("Model returned no usable questions for company=%r role=%r", company, role)
        return fallback_questions(company, role), True
    return questions, False


def get_question_page(
    db: Session,
    *,
    user_id: int,
    company: str,
    role: str,
    page: int = 1,
    client_factory: Callable[[], OpenAIClient] | None = None,
) -> QuestionPage:
    company = company.strip()
    role = role.strip()
    per_page = max(1, settings.QUESTIONS_PER_PAGE)
    start = (page - 1) * per_page
    end = start + per_page

    cached = _cached_questions(db, user_id, company, role)
    if len(cached) > start:
        return QuestionPage(
            questions=[_to_generated(r) for r in cached[start:end]],
            page=page,
            has_more=len(cached) > end,
            from_cache=True,
        )

    avoid = [r.question for r in cached[-20:]]
    generated, used_fallback = generate_questions(company, role, avoid=avoid, client_factory=client_factory)
    if used_fallback:
        # Canned content is not cached so a later request can still get real questions.
        return QuestionPage(questions=generated, page=page, has_more=False, from_cache=False, fallback=True)

    rows = [
        InterviewQuestion(
            user_id=user_id,
            company=company,
            role=role,
            question=q.question,
            answer=q.answer,
            example=q.example,
            type=q.type,
        )
        for q in generated
    ]
    has_more = page < settings.QUESTIONS_MAX_PAGES
    try:
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Storing generated questions failed; returning them unsaved")
        return QuestionPage(questions=generated, page=page, has_more=has_more, from_cache=False)

    for row in rows:
        db.refresh(row)
    return QuestionPage(
        questions=[_to_generated(r) for r in rows],
        page=page,
        has_more=has_more,
        from_cache=False,
    )
