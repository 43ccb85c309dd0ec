from fastapi import APIRouter, Depends
from sqlmodel import Session
import logging

from hiredready.ai.client import GenerativeClient, get_ai_client
from hiredready.ai.parsing import parse_model
from hiredready.ai.prompts import code_review_prompt, parse_difficulty, practice_question_prompt
from hiredready.auth import get_current_user
from hiredready.db import engine
from hiredready.errors import ServerError, UpstreamFormatError, UpstreamServiceError
from hiredready.models import Question, QuestionScope, Submission, SubmissionStatus, User
from hiredready.schemas import (
    CodeReview,
    GeneratePracticeQuestionRequest,
    PracticeQuestionDraft,
    SubmitSolutionRequest,
)
from hiredready.store import questions, submissions

router = APIRouter(prefix="/api/code", tags=["code"])
logger = logging.getLogger(__name__)

PRACTICE = QuestionScope.PRACTICE.value


def practice_view(session: Session, question: Question) -> dict:
    data = questions.to_dict(question)
    latest = submissions.latest_for_question(session, question.user_id, question.id)
    data["userSolution"] = latest.code if latest else question.solution_template
    data["feedback"] = latest.ai_feedback.get("overall") if latest else None
    return data


def review_feedback(review: CodeReview) -> dict:
    return {
        "overall": review.feedback_markdown,
        "codeQuality": None,
        "timeComplexity": None,
        "spaceComplexity": None,
        "suggestions": [],
        "score": None,
        "isCorrect": review.is_correct,
    }


@router.post("/generate", status_code=201)
def generate_question(
    payload: GeneratePracticeQuestionRequest,
    current_user: User = Depends(get_current_user),
    ai_client: GenerativeClient = Depends(get_ai_client),
):
    difficulty = parse_difficulty(payload.difficulty)

    # read-then-write without a lock: concurrent calls may repeat a title
    with Session(engine) as session:
        titles = questions.existing_titles(session, PRACTICE, difficulty.value, user_id=current_user.id)

    prompt = practice_question_prompt(difficulty, titles, payload.topic)
    try:
        draft = parse_model(ai_client.complete(prompt), PracticeQuestionDraft)
    except (UpstreamFormatError, UpstreamServiceError) as e:
        logger.error("Error generating code question: %s", e)
        raise ServerError("Failed to generate question from AI")

    with Session(engine) as session:
        question = questions.create(session, Question(
            scope=PRACTICE,
            user_id=current_user.id,
            title=draft.title.strip(),
            description=draft.prompt,
            difficulty=difficulty.value,
            category=payload.topic,
            language="javascript",
            solution_template=draft.solution_template,
        ))
        return practice_view(session, question)


@router.get("/difficulty/{difficulty}")
def get_questions_by_difficulty(difficulty: str, current_user: User = Depends(get_current_user)):
    level = parse_difficulty(difficulty, case_insensitive=True)
    with Session(engine) as session:
        items, _ = questions.list_by_filter(
            session, PRACTICE, user_id=current_user.id, difficulty=level.value, page_size=None
        )
        return [questions.to_dict(q) for q in items]


@router.get("/{question_id}")
def get_question_by_id(question_id: int, current_user: User = Depends(get_current_user)):
    with Session(engine) as session:
        question = questions.get_by_id(session, question_id, scope=PRACTICE, user_id=current_user.id)
        return practice_view(session, question)


@router.post("/submit/{question_id}")
def submit_solution(
    question_id: int,
    payload: SubmitSolutionRequest,
    current_user: User = Depends(get_current_user),
    ai_client: GenerativeClient = Depends(get_ai_client),
):
    with Session(engine) as session:
        question = questions.get_by_id(session, question_id, scope=PRACTICE, user_id=current_user.id)

    try:
        review = parse_model(
            ai_client.complete(code_review_prompt(question.description, payload.user_code)),
            CodeReview,
        )
    except (UpstreamFormatError, UpstreamServiceError) as e:
        logger.error("Error submitting solution: %s", e)
        raise ServerError("Failed to get feedback from AI")

    status = SubmissionStatus.ACCEPTED.value if review.is_correct else SubmissionStatus.WRONG_ANSWER.value
    with Session(engine) as session:
        submissions.create(session, Submission(
            user_id=current_user.id,
            question_id=question.id,
            code=payload.user_code,
            language=question.language,
            status=status,
            ai_feedback=review_feedback(review),
        ))
        # separate write; a crash here leaves an Accepted submission on an unsolved question
        if review.is_correct and questions.mark_solved(session, question.id):
            logger.info("User %s solved question %s", current_user.id, question.id)

    return {"feedback": review.feedback_markdown, "isCorrect": review.is_correct, "status": status}
