from typing import List, Optional, Tuple

from sqlmodel import Session, select, func

from hiredready.models import Question, Submission

DELETED_QUESTION = "Deleted Question"


def create(session: Session, submission: Submission) -> Submission:
    # append-only: there is no update path for a stored submission
    session.add(submission)
    session.commit()
    session.refresh(submission)
    return submission


def count_by_user(session: Session, user_id: int) -> int:
    return session.exec(
        select(func.count(Submission.id)).where(Submission.user_id == user_id)
    ).one()


def list_by_user(session: Session, user_id: int, page: int = 1,
                 page_size: int = 10) -> List[Tuple[Submission, Optional[Question]]]:
    """Newest-first submissions, each paired with its question if it still exists."""
    rows = session.exec(
        select(Submission, Question)
        .join(Question, Submission.question_id == Question.id, isouter=True)
        .where(Submission.user_id == user_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).all()
    return list(rows)


def latest_for_question(session: Session, user_id: int, question_id: int) -> Optional[Submission]:
    return session.exec(
        select(Submission)
        .where(Submission.user_id == user_id, Submission.question_id == question_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
    ).first()


def to_dict(submission: Submission, question: Optional[Question] = None) -> dict:
    data = {
        "id": submission.id,
        "userId": submission.user_id,
        "questionId": submission.question_id,
        "code": submission.code,
        "language": submission.language,
        "status": submission.status,
        "executionTime": submission.execution_time_ms,
        "memoryUsed": submission.memory_used_mb,
        "testCasesPassed": submission.test_cases_passed,
        "totalTestCases": submission.total_test_cases,
        "aiFeedback": submission.ai_feedback,
        "submittedAt": submission.submitted_at.isoformat(),
    }
    if question is not None:
        data["question"] = {
            "id": question.id,
            "title": question.title,
            "difficulty": question.difficulty,
            "category": question.category,
        }
    return data


def history_item(submission: Submission, question: Optional[Question]) -> dict:
    data = to_dict(submission, question)
    if question is None:
        data["question"] = {"id": submission.question_id, "title": DELETED_QUESTION,
                            "difficulty": None, "category": None}
    return data
