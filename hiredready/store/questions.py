from typing import List, Optional, Tuple

from sqlmodel import Session, select, func

from hiredready.errors import NotFound
from hiredready.models import Question, QuestionScope, QuestionStatus


def create(session: Session, question: Question) -> Question:
    question.status = QuestionStatus.GENERATED.value
    session.add(question)
    session.commit()
    session.refresh(question)
    return question


def _filtered(query, scope: str, user_id=None, difficulty=None, category=None):
    query = query.where(Question.scope == scope)
    if user_id is not None:
        query = query.where(Question.user_id == user_id)
    if difficulty:
        query = query.where(Question.difficulty == difficulty)
    if category:
        query = query.where(Question.category == category)
    return query


def list_by_filter(session: Session, scope: str, user_id: Optional[int] = None,
                   difficulty: Optional[str] = None, category: Optional[str] = None,
                   page: int = 1, page_size: Optional[int] = 10) -> Tuple[List[Question], int]:
    """Newest-first page of questions plus the total matching count.

    ``page_size=None`` returns every match.
    """
    query = _filtered(select(Question), scope, user_id, difficulty, category)
    query = query.order_by(Question.created_at.desc(), Question.id.desc())
    if page_size is not None:
        query = query.offset((page - 1) * page_size).limit(page_size)
    questions = session.exec(query).all()

    total = session.exec(
        _filtered(select(func.count(Question.id)), scope, user_id, difficulty, category)
    ).one()
    return list(questions), total


def existing_titles(session: Session, scope: str, difficulty: str,
                    user_id: Optional[int] = None, category: Optional[str] = None) -> List[str]:
    query = _filtered(select(Question.title), scope, user_id, difficulty, category)
    return list(session.exec(query).all())


def get_by_id(session: Session, question_id: int, scope: Optional[str] = None,
              user_id: Optional[int] = None) -> Question:
    question = session.get(Question, question_id)
    if not question:
        raise NotFound("Question not found")
    if scope is not None and question.scope != scope:
        raise NotFound("Question not found")
    if user_id is not None and question.user_id != user_id:
        raise NotFound("Question not found")
    return question


def mark_solved(session: Session, question_id: int) -> bool:
    """Move a question to Solved. Returns False when it already was."""
    question = get_by_id(session, question_id)
    if question.status == QuestionStatus.SOLVED.value:
        return False
    question.status = QuestionStatus.SOLVED.value
    session.add(question)
    session.commit()
    return True


def to_dict(question: Question) -> dict:
    """Client view of a question. Test cases are never included."""
    if question.scope == QuestionScope.PRACTICE.value:
        return {
            "id": question.id,
            "userId": question.user_id,
            "title": question.title,
            "prompt": question.description,
            "difficulty": question.difficulty,
            "language": question.language,
            "solutionTemplate": question.solution_template,
            "status": question.status,
            "createdAt": question.created_at.isoformat(),
        }
    return {
        "id": question.id,
        "title": question.title,
        "description": question.description,
        "difficulty": question.difficulty,
        "category": question.category,
        "constraints": question.constraints,
        "examples": question.examples,
        "starterCode": question.starter_code,
        "hints": question.hints,
        "tags": question.tags,
        "timeLimit": question.time_limit,
        "memoryLimit": question.memory_limit,
        "aiGenerated": question.ai_generated,
        "status": question.status,
        "createdAt": question.created_at.isoformat(),
    }
