from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
import logging
import math

from hiredready.ai.client import GenerativeClient, get_ai_client
from hiredready.ai.feedback import generate_feedback
from hiredready.ai.parsing import parse_model
from hiredready.ai.prompts import catalog_question_prompt, parse_difficulty
from hiredready.auth import get_current_user
from hiredready.db import engine
from hiredready.errors import InvalidInput, ServerError, UpstreamFormatError, UpstreamServiceError
from hiredready.judge.runner import Judge, final_status, get_judge
from hiredready.models import Question, QuestionScope, Submission, SUPPORTED_LANGUAGES, User
from hiredready.schemas import CatalogQuestionDraft, GenerateCodingQuestionRequest, SubmitCodeRequest
from hiredready.store import questions, submissions

router = APIRouter(prefix="/api/coding", tags=["coding"])
logger = logging.getLogger(__name__)

CATALOG = QuestionScope.CATALOG.value


@router.post("/generate")
def generate_coding_question(
    payload: GenerateCodingQuestionRequest,
    current_user: User = Depends(get_current_user),
    ai_client: GenerativeClient = Depends(get_ai_client),
):
    difficulty = parse_difficulty(payload.difficulty)

    with Session(engine) as session:
        titles = questions.existing_titles(session, CATALOG, difficulty.value, category=payload.category)

    prompt = catalog_question_prompt(difficulty, payload.category, payload.language, titles)
    try:
        draft = parse_model(ai_client.complete(prompt), CatalogQuestionDraft)
    except (UpstreamFormatError, UpstreamServiceError) as e:
        logger.error("Error generating coding question: %s", e)
        raise ServerError("Failed to generate coding question")

    with Session(engine) as session:
        question = questions.create(session, Question(
            scope=CATALOG,
            title=draft.title.strip(),
            description=draft.description,
            difficulty=difficulty.value,
            category=payload.category,
            language=payload.language,
            constraints=draft.constraints,
            examples=[example.model_dump() for example in draft.examples],
            starter_code=draft.starter_code,
            test_cases=[case.model_dump(by_alias=True) for case in draft.test_cases],
            hints=draft.hints,
            tags=draft.tags,
            ai_generated=True,
        ))
        logger.info("User %s generated catalog question %s", current_user.id, question.id)
        return {"success": True, "question": questions.to_dict(question)}


@router.get("/questions")
def list_coding_questions(
    difficulty: str = None,
    category: str = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    if difficulty:
        difficulty = parse_difficulty(difficulty).value

    with Session(engine) as session:
        items, total = questions.list_by_filter(
            session, CATALOG, difficulty=difficulty, category=category, page=page, page_size=limit
        )
        return {
            "success": True,
            "questions": [questions.to_dict(q) for q in items],
            "totalPages": math.ceil(total / limit),
            "currentPage": page,
            "total": total,
        }


@router.get("/questions/{question_id}")
def get_coding_question(question_id: int):
    with Session(engine) as session:
        question = questions.get_by_id(session, question_id, scope=CATALOG)
        return {"success": True, "question": questions.to_dict(question)}


@router.post("/submit")
def submit_code(
    payload: SubmitCodeRequest,
    current_user: User = Depends(get_current_user),
    ai_client: GenerativeClient = Depends(get_ai_client),
    judge: Judge = Depends(get_judge),
):
    language = payload.language.strip().lower()
    if language not in SUPPORTED_LANGUAGES:
        raise InvalidInput("Unsupported language")

    with Session(engine) as session:
        # test cases stay server-side: the judge needs them, the client never sees them
        question = questions.get_by_id(session, payload.question_id, scope=CATALOG)

    total = len(question.test_cases)
    execution = judge.execute(payload.code, language, question.test_cases)
    feedback = generate_feedback(ai_client, question, payload.code, language, execution)

    with Session(engine) as session:
        submission = submissions.create(session, Submission(
            user_id=current_user.id,
            question_id=question.id,
            code=payload.code,
            language=language,
            status=final_status(execution, total),
            execution_time_ms=execution.execution_time_ms,
            test_cases_passed=execution.passed,
            total_test_cases=total,
            ai_feedback=feedback,
        ))
        data = submissions.to_dict(submission, question)

    data["executionResult"] = execution.to_dict()
    return {"success": True, "submission": data}


@router.get("/submissions")
def list_submissions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
):
    with Session(engine) as session:
        rows = submissions.list_by_user(session, current_user.id, page=page, page_size=limit)
        total = submissions.count_by_user(session, current_user.id)
        return {
            "success": True,
            "submissions": [submissions.history_item(sub, q) for sub, q in rows],
            "totalPages": math.ceil(total / limit),
            "currentPage": page,
            "total": total,
        }
