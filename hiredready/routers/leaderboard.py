from fastapi import APIRouter, Depends
from sqlalchemy import case
from sqlmodel import Session, select, func

from hiredready.auth import get_current_user
from hiredready.db import engine
from hiredready.models import Question, QuestionScope, QuestionStatus, User

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])

POINTS_BY_DIFFICULTY = {"Easy": 10, "Medium": 25, "Hard": 50}
LEADERBOARD_SIZE = 20


def compute_leaderboard(session: Session, limit: int = LEADERBOARD_SIZE) -> list:
    """Rank users by points earned from their solved practice questions.

    Recomputed on every call. Ties are broken by user id, lowest first.
    Questions whose owner no longer exists are left out.
    """
    points = case(
        *[(Question.difficulty == level, value) for level, value in POINTS_BY_DIFFICULTY.items()],
        else_=0,
    )
    total_score = func.sum(points).label("total_score")

    rows = session.exec(
        select(Question.user_id, total_score, User.name, User.profile_image_url)
        .join(User, Question.user_id == User.id)
        .where(
            Question.status == QuestionStatus.SOLVED.value,
            Question.scope == QuestionScope.PRACTICE.value,
        )
        .group_by(Question.user_id, User.name, User.profile_image_url)
        .order_by(total_score.desc(), Question.user_id.asc())
        .limit(limit)
    ).all()

    return [
        {
            "userId": row.user_id,
            "totalScore": int(row.total_score or 0),
            "name": row.name,
            "photo": row.profile_image_url,
        }
        for row in rows
    ]


@router.get("")
def leaderboard(current_user: User = Depends(get_current_user)):
    with Session(engine) as session:
        return compute_leaderboard(session)
