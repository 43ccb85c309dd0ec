from typing import Optional
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class QuestionScope(str, Enum):
    CATALOG = "catalog"    # shared, listed for everyone
    PRACTICE = "practice"  # owned by one user


class QuestionStatus(str, Enum):
    GENERATED = "Generated"
    SOLVED = "Solved"


class SubmissionStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong Answer"
    TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"
    RUNTIME_ERROR = "Runtime Error"
    COMPILATION_ERROR = "Compilation Error"


class RegisterType(str, Enum):
    LOCAL = "normal"
    GOOGLE = "google"


SUPPORTED_LANGUAGES = ("javascript", "python", "java", "cpp")


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    password_hash: Optional[str] = None  # only for local registrations
    profile_image_url: Optional[str] = None
    register_type: str = RegisterType.LOCAL.value
    social_id: Optional[str] = Field(default=None, index=True)
    password_reset_token: Optional[str] = None  # sha256 of the emailed token
    password_reset_expires: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Question(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    scope: str = Field(default=QuestionScope.CATALOG.value, index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    title: str
    description: str  # Markdown prompt for practice questions
    difficulty: str = Field(index=True)  # Easy | Medium | Hard
    category: str = Field(default="General", index=True)
    language: str = "javascript"
    constraints: str = ""
    solution_template: Optional[str] = None
    examples: list = Field(default_factory=list, sa_column=Column(JSON))
    starter_code: dict = Field(default_factory=dict, sa_column=Column(JSON))
    test_cases: list = Field(default_factory=list, sa_column=Column(JSON))
    hints: list = Field(default_factory=list, sa_column=Column(JSON))
    tags: list = Field(default_factory=list, sa_column=Column(JSON))
    time_limit: int = 30  # minutes
    memory_limit: int = 256  # MB
    ai_generated: bool = True
    status: str = QuestionStatus.GENERATED.value
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Submission(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    question_id: int = Field(index=True)  # the question may be deleted later
    code: str
    language: str
    status: str = SubmissionStatus.PENDING.value
    execution_time_ms: int = 0
    memory_used_mb: int = 0
    test_cases_passed: int = 0
    total_test_cases: int = 0
    ai_feedback: dict = Field(default_factory=dict, sa_column=Column(JSON))
    submitted_at: datetime = Field(default_factory=datetime.utcnow, index=True)


class Resume(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    original_name: str
    file_path: str
    analysis: str = "No analysis yet."
    created_at: datetime = Field(default_factory=datetime.utcnow)
