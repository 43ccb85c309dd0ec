import json

from sqlmodel import Session, select

from hiredready.db import engine
from hiredready.models import Question, Submission
from hiredready.store import questions

REVERSE_WORDS = json.dumps({
    "title": "Reverse Words",
    "prompt": "## Reverse Words\nReverse the order of words in a sentence.",
    "solutionTemplate": "function reverseWords(s) {\n  // Your code here\n}",
})


def review(is_correct, text="### Code Review\nLooks right."):
    return json.dumps({"feedbackMarkdown": text, "isCorrect": is_correct})


def practice(add_question, owner, **fields):
    values = {
        "scope": "practice",
        "user_id": owner.id,
        "title": "Reverse Words",
        "description": "Reverse the order of words.",
        "solution_template": "function reverseWords(s) {}",
    }
    values.update(fields)
    return add_question(**values)


def test_generate_easy_question_avoids_previous_titles(client, ai, user, auth_headers, add_question):
    practice(add_question, user, title="FizzBuzz")
    ai.reply(REVERSE_WORDS)

    resp = client.post("/api/code/generate", json={"difficulty": "Easy"}, headers=auth_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["title"] == "Reverse Words"
    assert data["status"] == "Generated"
    assert data["userId"] == user.id
    assert data["userSolution"] == data["solutionTemplate"]
    assert data["feedback"] is None
    assert 'NOT one of the following: "FizzBuzz"' in ai.prompts[0]


def test_generate_only_excludes_own_titles(client, ai, auth_headers, add_question, make_user):
    practice(add_question, make_user(), title="Someone Else's Problem")
    ai.reply(REVERSE_WORDS)
    client.post("/api/code/generate", json={"difficulty": "Easy"}, headers=auth_headers)
    assert "This is the first question of this difficulty." in ai.prompts[0]


def test_generate_rejects_bad_difficulty(client, ai, auth_headers):
    resp = client.post("/api/code/generate", json={"difficulty": "trivial"}, headers=auth_headers)
    assert resp.status_code == 400
    assert ai.prompts == []


def test_generate_failure(client, ai, auth_headers):
    ai.reply('{"title": "No prompt here"}')
    resp = client.post("/api/code/generate", json={"difficulty": "Medium"}, headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to generate question from AI"}
    with Session(engine) as session:
        assert session.exec(select(Question)).all() == []


def test_list_by_difficulty_is_case_insensitive_and_scoped(client, user, auth_headers, add_question, make_user):
    practice(add_question, user, title="Mine", difficulty="Easy")
    practice(add_question, user, title="Mine but Hard", difficulty="Hard")
    practice(add_question, make_user(), title="Not mine", difficulty="Easy")
    add_question(title="Catalog", difficulty="Easy")

    resp = client.get("/api/code/difficulty/easy", headers=auth_headers)
    assert resp.status_code == 200
    assert [q["title"] for q in resp.json()] == ["Mine"]

    assert client.get("/api/code/difficulty/whatever", headers=auth_headers).status_code == 400


def test_get_question_is_owner_only(client, user, auth_headers, add_question, make_user):
    mine = practice(add_question, user)
    theirs = practice(add_question, make_user())
    catalog = add_question()

    assert client.get(f"/api/code/{mine.id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/code/{theirs.id}", headers=auth_headers).status_code == 404
    assert client.get(f"/api/code/{catalog.id}", headers=auth_headers).status_code == 404


def test_correct_submission_marks_solved(client, ai, user, auth_headers, add_question):
    question = practice(add_question, user)
    ai.reply(review(True))

    resp = client.post(
        f"/api/code/submit/{question.id}",
        json={"userCode": "const reverseWords = s => s.split(' ').reverse().join(' ');"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "feedback": "### Code Review\nLooks right.",
        "isCorrect": True,
        "status": "Accepted",
    }

    view = client.get(f"/api/code/{question.id}", headers=auth_headers).json()
    assert view["status"] == "Solved"
    assert view["userSolution"].startswith("const reverseWords")
    assert view["feedback"] == "### Code Review\nLooks right."

    with Session(engine) as session:
        submission = session.exec(select(Submission)).one()
        assert submission.status == "Accepted"
        assert submission.ai_feedback["isCorrect"] is True


def test_incorrect_submission_keeps_question_open(client, ai, user, auth_headers, add_question):
    question = practice(add_question, user)
    ai.reply(review(False, "Misses empty input."))

    resp = client.post(f"/api/code/submit/{question.id}", json={"userCode": "return s"}, headers=auth_headers)
    assert resp.json()["isCorrect"] is False
    assert resp.json()["status"] == "Wrong Answer"

    view = client.get(f"/api/code/{question.id}", headers=auth_headers).json()
    assert view["status"] == "Generated"
    assert view["userSolution"] == "return s"


def test_solved_stays_solved(client, ai, user, auth_headers, add_question):
    question = practice(add_question, user)
    ai.reply(review(True), review(False), review(True))
    for code in ("a", "b", "c"):
        client.post(f"/api/code/submit/{question.id}", json={"userCode": code}, headers=auth_headers)

    with Session(engine) as session:
        assert session.get(Question, question.id).status == "Solved"
        assert len(session.exec(select(Submission)).all()) == 3
        assert questions.mark_solved(session, question.id) is False


def test_review_failure_is_reported(client, ai, user, auth_headers, add_question):
    question = practice(add_question, user)
    ai.reply("The code looks fine to me!")
    resp = client.post(f"/api/code/submit/{question.id}", json={"userCode": "x"}, headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to get feedback from AI"}
    with Session(engine) as session:
        assert session.get(Question, question.id).status == "Generated"
        assert session.exec(select(Submission)).all() == []


def test_routes_require_auth(client):
    assert client.post("/api/code/generate", json={"difficulty": "Easy"}).status_code == 401
    assert client.get("/api/code/difficulty/Easy").status_code == 401
    assert client.get("/api/code/1").status_code == 401
    assert client.post("/api/code/submit/1", json={"userCode": "x"}).status_code == 401
