import logging

from models import db, CheckpointTest, CheckpointQuestion, CheckpointAttempt, CheckpointAnswer
from progress import ensure_progress_row
from seeding import ensure_content_seeded

log = logging.getLogger(__name__)


def score_percent(correct: int, total: int) -> int:
    """Percentage of correct answers, rounded half up (7 of 8 -> 88)."""
    if not total:
        return 0
    return (correct * 200 + total) // (2 * total)


def get_checkpoint_test_for_day(day: int):
    ensure_content_seeded()
    return CheckpointTest.query.filter_by(day_number=day).first()


def get_checkpoint_test_by_id(test_id: str):
    ensure_content_seeded()
    return db.session.get(CheckpointTest, test_id)


def get_checkpoint_progress(user_id: int, test_id: str) -> dict:
    rows = CheckpointAnswer.query.filter_by(user_id=user_id, checkpoint_test_id=test_id).all()
    return {row.question_id: row for row in rows}


def has_passed_checkpoint(user_id: int, test_id: str) -> bool:
    return CheckpointAttempt.query.filter_by(
        user_id=user_id, checkpoint_test_id=test_id, passed=True
    ).first() is not None


def get_latest_checkpoint_attempt(user_id: int, test_id: str):
    return (
        CheckpointAttempt.query
        .filter_by(user_id=user_id, checkpoint_test_id=test_id)
        .order_by(CheckpointAttempt.created_at.desc(), CheckpointAttempt.id.desc())
        .first()
    )


def record_checkpoint_answer(user_id: int, question: CheckpointQuestion, selected_index: int) -> dict:
    """Save or replace the answer to one question."""
    if not 0 <= selected_index < len(question.choices_json or []):
        return {"ok": False, "correct": False}

    is_correct = selected_index == question.correct_index
    answer = CheckpointAnswer.query.filter_by(user_id=user_id, question_id=question.id).first()
    if answer is None:
        answer = CheckpointAnswer(
            user_id=user_id,
            checkpoint_test_id=question.checkpoint_test_id,
            question_id=question.id,
        )
        db.session.add(answer)
    answer.selected_index = selected_index
    answer.is_correct = is_correct
    db.session.commit()
    return {"ok": True, "correct": is_correct}


def finalize_checkpoint_attempt(user_id: int, test: CheckpointTest) -> dict:
    """Grade the saved answers and store an attempt.

    XP is paid only the first time the test is passed; every call still
    records an attempt row.
    """
    progress = ensure_progress_row(user_id)
    already_passed = has_passed_checkpoint(user_id, test.id)

    answers = get_checkpoint_progress(user_id, test.id)
    correct_count = sum(1 for answer in answers.values() if answer.is_correct)
    total_questions = len(test.questions)
    score = score_percent(correct_count, total_questions)
    passed = score >= test.pass_percent

    xp_awarded = 0
    if passed and not already_passed:
        xp_awarded = test.xp_reward
        progress.xp += xp_awarded

    db.session.add(CheckpointAttempt(user_id=user_id, checkpoint_test_id=test.id, score=score, passed=passed))
    db.session.commit()
    log.info(
        "User %s finished %s: score=%s passed=%s xp=+%s",
        user_id, test.id, score, passed, xp_awarded,
    )
    return {
        "score": score,
        "passed": passed,
        "total_questions": total_questions,
        "correct_count": correct_count,
        "xp_awarded": xp_awarded,
    }


def reset_checkpoint_answers(user_id: int, test_id: str):
    CheckpointAnswer.query.filter_by(user_id=user_id, checkpoint_test_id=test_id).delete()
    db.session.commit()
