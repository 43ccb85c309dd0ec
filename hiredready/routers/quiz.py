from fastapi import APIRouter, Depends
import logging

from hiredready.ai.client import GenerativeClient, get_ai_client
from hiredready.ai.parsing import parse_model_list
from hiredready.ai.prompts import quiz_prompt
from hiredready.auth import get_current_user
from hiredready.errors import InvalidInput, ServerError, UpstreamFormatError, UpstreamServiceError
from hiredready.models import User
from hiredready.schemas import QuizQuestion, QuizRequest

router = APIRouter(prefix="/api/ai", tags=["ai"])
logger = logging.getLogger(__name__)


@router.post("/generate-quiz")
def generate_quiz(
    payload: QuizRequest,
    current_user: User = Depends(get_current_user),
    ai_client: GenerativeClient = Depends(get_ai_client),
):
    if not payload.role or not payload.experience:
        raise InvalidInput("Role and experience are required.")

    try:
        quiz = parse_model_list(ai_client.complete(quiz_prompt(payload.role, payload.experience)), QuizQuestion)
        if not quiz:
            raise UpstreamFormatError("AI service returned an empty quiz")
    except (UpstreamFormatError, UpstreamServiceError) as e:
        logger.error("AI quiz generation error: %s", e)
        raise ServerError("Failed to generate quiz. Please try again.")

    return [q.model_dump(by_alias=True) for q in quiz]
