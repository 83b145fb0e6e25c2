import seeding
from checkpoints import get_checkpoint_test_for_day
from lessons import get_lesson_for_day
from models import db, AuthSession, UserDay, UserProgress
from skill_checks import get_skill_check_by_id

PASSWORD = "secret123"


def flashes(client):
    with client.session_transaction() as sess:
        return [message for _category, message in sess.pop("_flashes", [])]


def lesson_steps(app, day):
    with app.app_context():
        return [(step.id, step.is_question, step.correct_index) for step in get_lesson_for_day(day).steps]


def checkpoint_answers(app, day):
    with app.app_context():
        return [
            (question.id, question.correct_index, len(question.choices_json))
            for question in get_checkpoint_test_for_day(day).questions
        ]


def walk_lesson(client, app, day=1):
    for step_id, is_question, correct_index in lesson_steps(app, day):
        if is_question:
            response = client.post("/lesson/answer", data={"step_id": step_id, "answer_index": correct_index})
            assert response.headers["Location"].endswith(f"/lesson?show={step_id}")
        client.post("/lesson/continue", data={"step_id": step_id})


def pass_checkpoint_via_client(client, app, day=1):
    for question_id, correct_index, _ in checkpoint_answers(app, day):
        client.post(f"/checkpoint/{day}/answer", data={"question_id": question_id, "choice_index": correct_index})
    return client.post(f"/checkpoint/{day}/finalize")


# ── Auth ──────────────────────────────────────────────────────────────────────

def test_pages_require_login(client):
    response = client.get("/")
    assert response.headers["Location"].endswith("/dashboard")

    response = client.get("/dashboard")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")
    assert flashes(client) == ["Please log in to continue."]


def test_register_validation(client):
    response = client.post("/register", data={"email": "a@example.com", "password": "123"})
    assert response.status_code == 200
    assert b"Password must be at least 6 characters." in response.data

    response = client.post("/register", data={"email": "", "password": ""})
    assert b"Email and password are required." in response.data


def test_register_logs_in(client):
    response = client.post("/register", data={"email": "New@Example.com", "password": PASSWORD})
    assert response.headers["Location"].endswith("/dashboard")

    page = client.get("/dashboard")
    assert page.status_code == 200
    assert b"Day 1 of 84" in page.data


def test_duplicate_email_rejected(app, auth_client):
    auth_client.post("/logout")
    response = auth_client.post("/register", data={"email": "LEARNER@example.com", "password": PASSWORD})
    assert b"Email is already registered." in response.data


def test_login_and_logout(app, auth_client):
    auth_client.post("/logout")

    response = auth_client.post("/login", data={"email": "learner@example.com", "password": "wrong-password"})
    assert b"Invalid email or password." in response.data

    response = auth_client.post("/login", data={"email": "learner@example.com", "password": PASSWORD})
    assert response.headers["Location"].endswith("/dashboard")
    assert auth_client.get("/dashboard").status_code == 200

    assert auth_client.get("/logout").status_code == 405
    response = auth_client.post("/logout")
    assert response.headers["Location"].endswith("/login")
    assert auth_client.get("/dashboard").status_code == 302
    with app.app_context():
        assert AuthSession.query.count() == 0


def test_logged_in_user_skips_auth_pages(auth_client):
    for path in ("/login", "/register"):
        response = auth_client.get(path)
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dashboard")


def test_wsgi_exposes_the_app(app):
    import wsgi

    assert wsgi.application is app


# ── Lesson flow ───────────────────────────────────────────────────────────────

def test_lesson_walkthrough_completes_day(app, auth_client, registered_user_id):
    assert auth_client.get("/lesson").status_code == 200
    walk_lesson(auth_client, app)

    page = auth_client.get("/dashboard")
    assert b"Take the checkpoint" in page.data
    with app.app_context():
        assert db.session.get(UserDay, (registered_user_id, 1)) is not None
        assert db.session.get(UserProgress, registered_user_id).xp == 10


def test_answer_for_other_day_is_rejected(app, auth_client, registered_user_id):
    step_id, _, correct_index = next(s for s in lesson_steps(app, 2) if s[1])
    response = auth_client.post("/lesson/answer", data={"step_id": step_id, "answer_index": correct_index})
    assert response.headers["Location"].endswith("/dashboard")
    assert flashes(auth_client) == ["That step is not part of today's lesson."]


def test_answer_needs_a_valid_choice(app, auth_client):
    step_id = next(s for s in lesson_steps(app, 1) if s[1])[0]
    response = auth_client.post("/lesson/answer", data={"step_id": step_id, "answer_index": "nope"})
    assert response.headers["Location"].endswith("/lesson")
    assert flashes(auth_client) == ["Pick one of the answers."]


def test_complete_before_finishing_steps(auth_client):
    response = auth_client.post("/lesson/complete")
    assert response.headers["Location"].endswith("/lesson")
    assert flashes(auth_client) == ["Finish all steps first."]


def test_review_requires_completed_day(app, auth_client):
    response = auth_client.get("/review/1")
    assert response.headers["Location"].endswith("/dashboard")
    assert flashes(auth_client) == ["You can only review days you have completed."]

    walk_lesson(auth_client, app)
    auth_client.get("/dashboard")
    assert auth_client.get("/review/1?step=4").status_code == 200


# ── Checkpoints ───────────────────────────────────────────────────────────────

def test_checkpoint_needs_finished_lesson(auth_client):
    response = auth_client.get("/checkpoint/1")
    assert response.headers["Location"].endswith("/lesson")
    assert flashes(auth_client) == ["Finish the lesson first."]


def test_future_checkpoint_is_locked(auth_client):
    response = auth_client.get("/checkpoint/5")
    assert response.headers["Location"].endswith("/dashboard")
    assert flashes(auth_client) == ["Checkpoint locked until you reach this day."]


def test_finalize_needs_every_answer(app, auth_client):
    walk_lesson(auth_client, app)
    response = auth_client.post("/checkpoint/1/finalize")
    assert response.headers["Location"].endswith("/checkpoint/1")
    assert flashes(auth_client) == ["Finish all questions first."]


def test_passing_checkpoint_unlocks_next_day(app, auth_client, registered_user_id):
    walk_lesson(auth_client, app)
    assert auth_client.get("/checkpoint/1").status_code == 200

    response = pass_checkpoint_via_client(auth_client, app)
    assert response.headers["Location"].endswith("/checkpoint/1?result=done")
    assert flashes(auth_client) == ["+15 XP"]

    page = auth_client.get("/checkpoint/1?result=done")
    assert b"Passed" in page.data
    assert b"You scored 100%" in page.data

    assert b"Day 2 of 84" in auth_client.get("/dashboard").data
    with app.app_context():
        assert db.session.get(UserProgress, registered_user_id).xp == 25


def test_failed_checkpoint_can_be_reset(app, auth_client):
    walk_lesson(auth_client, app)
    for question_id, correct_index, choice_count in checkpoint_answers(app, 1):
        index = (correct_index + 1) % choice_count
        auth_client.post("/checkpoint/1/answer", data={"question_id": question_id, "choice_index": index})
    auth_client.post("/checkpoint/1/finalize")

    page = auth_client.get("/checkpoint/1?result=done")
    assert b"Not passed" in page.data
    assert b"Retry checkpoint" in page.data

    auth_client.post("/checkpoint/1/reset")
    page = auth_client.get("/checkpoint/1")
    assert b"Question 1 of 6" in page.data
    assert b"Day 1 of 84" in auth_client.get("/dashboard").data


# ── Skill checks, patterns, examples ──────────────────────────────────────────

def test_skill_check_answer(app, auth_client, registered_user_id):
    with app.app_context():
        correct_index = get_skill_check_by_id("day-1-skill-1").correct_index

    response = auth_client.post("/skill-check/day-1-skill-1", data={"choice_index": correct_index})
    assert response.headers["Location"].endswith("/skill-check/day-1-skill-1?result=correct")
    assert flashes(auth_client) == ["+5 XP"]

    page = auth_client.get("/skill-check/day-1-skill-1?result=correct")
    assert b"Completed" in page.data
    with app.app_context():
        assert db.session.get(UserProgress, registered_user_id).xp == 5


def test_earlier_day_skill_check_shows_completed(app, auth_client):
    walk_lesson(auth_client, app)
    pass_checkpoint_via_client(auth_client, app)
    assert b"Day 2 of 84" in auth_client.get("/dashboard").data

    page = auth_client.get("/skill-check/day-1-skill-2")
    assert page.status_code == 200
    assert b"Completed" in page.data


def test_skill_check_for_future_day_is_locked(auth_client):
    response = auth_client.get("/skill-check/day-5-skill-1")
    assert response.headers["Location"].endswith("/dashboard")
    assert flashes(auth_client) == ["Skill check locked for a future day."]

    auth_client.get("/skill-check/not-a-check")
    assert flashes(auth_client) == ["Skill check not found."]


def test_pattern_finish(auth_client):
    assert auth_client.get("/patterns/day-1-pattern-1").status_code == 200
    response = auth_client.post("/patterns/day-1-pattern-1/finish")
    assert response.headers["Location"].endswith("/patterns/day-1-pattern-1?done=1")

    auth_client.get("/patterns/day-3-pattern-1")
    assert flashes(auth_client) == ["Pattern locked for a future day."]


def test_examples(auth_client):
    page = auth_client.get("/examples/charts")
    assert page.status_code == 200
    assert b"Good vs bad charts" in page.data
    assert auth_client.get("/examples/unknown").headers["Location"].endswith("/dashboard")


def test_broken_content_returns_503(auth_client, monkeypatch):
    monkeypatch.setattr(seeding, "_seed_is_current", lambda content: False)
    monkeypatch.setattr(seeding, "lint_program_content", lambda content: [{"day": 1, "issues": ["Broken."]}])
    seeding.reset_seed_flag()

    response = auth_client.get("/dashboard")
    assert response.status_code == 503
    assert b"Lesson content is unavailable right now." in response.data

    monkeypatch.undo()
    assert auth_client.get("/dashboard").status_code == 200
