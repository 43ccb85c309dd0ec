"""
Request bodies and the JSON contracts expected back from the AI service.

AI-side models validate what the model returned before anything is stored;
a mismatch is reported as an UpstreamFormatError by hiredready.ai.parsing.
"""
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _as_text(value: Any) -> Any:
    # models often emit arrays or numbers for test-case values
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


# ---------- Request bodies ----------

class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    profile_image_url: Optional[str] = Field(None, alias="profileImageUrl")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, max_length=128)


class GenerateCodingQuestionRequest(BaseModel):
    difficulty: str
    category: str = "General"
    language: str = "javascript"


class SubmitCodeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: int = Field(..., alias="questionId")
    code: str = Field(..., min_length=1)
    language: str


class GeneratePracticeQuestionRequest(BaseModel):
    difficulty: str
    topic: str = "Data Structures and Algorithms"


class SubmitSolutionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_code: str = Field(..., alias="userCode", min_length=1)


class QuizRequest(BaseModel):
    role: Optional[str] = None
    experience: Optional[str] = None

    @field_validator("experience", mode="before")
    @classmethod
    def experience_as_text(cls, value):
        return None if value is None else str(value)


# ---------- AI response contracts ----------

class PracticeQuestionDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    solution_template: str = Field("", alias="solutionTemplate")


class ExampleDraft(BaseModel):
    input: str = ""
    output: str = ""
    explanation: str = ""

    @field_validator("input", "output", "explanation", mode="before")
    @classmethod
    def values_as_text(cls, value):
        return _as_text(value) or ""


class CaseDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input: str
    expected_output: str = Field(..., alias="expectedOutput")
    is_hidden: bool = Field(False, alias="isHidden")

    @field_validator("input", "expected_output", mode="before")
    @classmethod
    def values_as_text(cls, value):
        return _as_text(value)


class CatalogQuestionDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    constraints: str = ""
    examples: List[ExampleDraft] = []
    starter_code: Dict[str, str] = Field(default_factory=dict, alias="starterCode")
    test_cases: List[CaseDraft] = Field(..., alias="testCases", min_length=1)
    hints: List[str] = []
    tags: List[str] = []

    @field_validator("constraints", mode="before")
    @classmethod
    def constraints_as_text(cls, value):
        if isinstance(value, list):
            return "\n".join(str(item) for item in value)
        return _as_text(value) or ""


class CodeReview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    feedback_markdown: str = Field(..., alias="feedbackMarkdown")
    is_correct: bool = Field(..., alias="isCorrect")


class AIFeedback(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    overall: str
    code_quality: str = Field("", alias="codeQuality")
    time_complexity: str = Field("", alias="timeComplexity")
    space_complexity: str = Field("", alias="spaceComplexity")
    suggestions: List[str] = []
    score: int = Field(..., ge=0, le=100)


class QuizQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_answer: str = Field(..., alias="correctAnswer")

    @field_validator("correct_answer")
    @classmethod
    def answer_is_an_option(cls, value, info):
        if value not in info.data.get("options", []):
            raise ValueError("correctAnswer must be one of the options")
        return value


class ResumeCheck(BaseModel):
    is_resume: bool
    reason: str = ""
