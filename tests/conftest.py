import os
import tempfile

import pytest

# Point the app at a throwaway database before it is imported.
_db_dir = tempfile.mkdtemp(prefix="analyst-path-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_db_dir, "test.db")
os.environ["SECRET_KEY"] = "test-secret"

from app import app as flask_app  # noqa: E402
from models import (  # noqa: E402
    db, User, AuthSession, UserProgress, UserDay, UserStepProgress,
    UserSkillCheckAnswer, UserSkillCheckCompletion, UserPatternCompletion,
    CheckpointAttempt, CheckpointAnswer,
)
from auth import create_user  # noqa: E402
from lessons import get_lesson_for_day, record_answer, record_learn_step  # noqa: E402
from checkpoints import get_checkpoint_test_for_day, record_checkpoint_answer, finalize_checkpoint_attempt  # noqa: E402
from seeding import ensure_content_seeded  # noqa: E402

# Child tables first; SQLite does not enforce ON DELETE CASCADE by default.
USER_TABLES = [
    CheckpointAnswer, CheckpointAttempt, UserPatternCompletion, UserSkillCheckCompletion,
    UserSkillCheckAnswer, UserStepProgress, UserDay, UserProgress, AuthSession, User,
]

PASSWORD = "secret123"


@pytest.fixture(scope="session")
def app():
    flask_app.config.update(TESTING=True)
    with flask_app.app_context():
        ensure_content_seeded()
    yield flask_app


@pytest.fixture(autouse=True)
def clean_user_tables(app):
    yield
    with app.app_context():
        for model in USER_TABLES:
            model.query.delete()
        db.session.commit()


@pytest.fixture
def ctx(app):
    """An active app context for calling domain functions directly."""
    with app.app_context():
        yield


@pytest.fixture
def user_id(ctx):
    return create_user("learner@example.com", PASSWORD).id


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    client.post("/register", data={"email": "learner@example.com", "password": PASSWORD})
    return client


@pytest.fixture
def registered_user_id(app, auth_client):
    with app.app_context():
        return User.query.filter_by(email="learner@example.com").one().id


@pytest.fixture
def finish_steps():
    """Answer every step of a lesson; needs an active app context."""
    def _finish(uid, day, correct=True):
        for step in get_lesson_for_day(day).steps:
            if step.is_question:
                index = step.correct_index if correct else (step.correct_index + 1) % len(step.choices)
                record_answer(uid, step.id, index)
            else:
                record_learn_step(uid, step.id)
    return _finish


@pytest.fixture
def pass_checkpoint():
    """Answer every checkpoint question correctly and grade it; needs an active app context."""
    def _pass(uid, day):
        test = get_checkpoint_test_for_day(day)
        for question in test.questions:
            record_checkpoint_answer(uid, question, question.correct_index)
        return finalize_checkpoint_attempt(uid, test)
    return _pass
