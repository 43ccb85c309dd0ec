import os
import tempfile
from pathlib import Path

# must be set before hiredready.config is imported
_TMP = tempfile.mkdtemp(prefix="hiredready-tests-")
os.environ["HIREDREADY_DB_PATH"] = str(Path(_TMP) / "test.db")
os.environ["DATA_DIR"] = _TMP
os.environ["OPENAI_API_KEY"] = ""
os.environ["FRONTEND_URL"] = "http://frontend.test"
os.environ.pop("DATABASE_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from hiredready.ai.client import get_ai_client
from hiredready.auth import create_access_token, get_password_hash
from hiredready.db import engine, init_db
from hiredready.judge.runner import ExecutionResult, get_judge, redacted_results, verdict
from hiredready.main import app
from hiredready.models import Question, QuestionScope, User


class FakeAI:
    """Replays canned completions and records every prompt it was sent."""

    def __init__(self):
        self.responses = []
        self.prompts = []

    def reply(self, *responses):
        self.responses.extend(responses)
        return self

    def complete(self, prompt):
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("unexpected AI call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeJudge:
    """Passes every case unless ``passed`` is set."""

    def __init__(self):
        self.passed = None
        self.calls = []

    def execute(self, code, language, test_cases):
        self.calls.append((code, language, test_cases))
        total = len(test_cases)
        passed = total if self.passed is None else self.passed
        return ExecutionResult(
            status=verdict(passed, total),
            passed=passed,
            total=total,
            execution_time_ms=120,
            test_results=redacted_results(test_cases, passed),
        )


@pytest.fixture(autouse=True)
def fresh_db():
    SQLModel.metadata.drop_all(engine)
    init_db()
    yield


@pytest.fixture
def ai():
    fake = FakeAI()
    app.dependency_overrides[get_ai_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_ai_client, None)


@pytest.fixture
def judge():
    fake = FakeJudge()
    app.dependency_overrides[get_judge] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_judge, None)


@pytest.fixture
def client(ai, judge):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(name=None, email=None, password="secret123", **fields):
        counter["n"] += 1
        n = counter["n"]
        with Session(engine) as session:
            user = User(
                name=name or f"User {n}",
                email=email or f"user{n}@example.com",
                password_hash=get_password_hash(password) if password else None,
                **fields,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user(name="Ada", email="ada@example.com")


def _bearer(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(user):
    return _bearer(user)


@pytest.fixture
def add_question():
    def _add(**fields):
        values = {
            "scope": QuestionScope.CATALOG.value,
            "title": "Two Sum",
            "description": "Find two numbers adding up to target.",
            "difficulty": "Easy",
        }
        values.update(fields)
        with Session(engine) as session:
            question = Question(**values)
            session.add(question)
            session.commit()
            session.refresh(question)
            return question

    return _add


@pytest.fixture
def bearer():
    return _bearer
