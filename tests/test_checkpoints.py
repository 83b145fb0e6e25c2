import pytest

from checkpoints import (
    finalize_checkpoint_attempt, get_checkpoint_progress, get_checkpoint_test_by_id, get_checkpoint_test_for_day,
    get_latest_checkpoint_attempt, has_passed_checkpoint, record_checkpoint_answer, reset_checkpoint_answers,
    score_percent,
)
from models import db, CheckpointAttempt, UserProgress


@pytest.mark.parametrize("correct, total, expected", [
    (7, 8, 88),
    (5, 8, 63),
    (1, 8, 13),
    (4, 6, 67),
    (6, 6, 100),
    (0, 6, 0),
    (0, 0, 0),
])
def test_score_percent(correct, total, expected):
    assert score_percent(correct, total) == expected


def _answer(uid, test, correct_count):
    for position, question in enumerate(test.questions):
        index = question.correct_index
        if position >= correct_count:
            index = (index + 1) % len(question.choices_json)
        record_checkpoint_answer(uid, question, index)


def test_lookup_by_day_and_id(ctx):
    test = get_checkpoint_test_for_day(1)
    assert test.id == "checkpoint-day-1"
    assert test.pass_percent == 70
    assert len(test.questions) == 6
    assert get_checkpoint_test_by_id("checkpoint-day-1").day_number == 1
    assert get_checkpoint_test_for_day(85) is None


def test_answer_can_be_changed(ctx, user_id):
    question = get_checkpoint_test_for_day(1).questions[0]
    wrong = (question.correct_index + 1) % len(question.choices_json)

    assert record_checkpoint_answer(user_id, question, wrong) == {"ok": True, "correct": False}
    assert record_checkpoint_answer(user_id, question, question.correct_index) == {"ok": True, "correct": True}

    progress = get_checkpoint_progress(user_id, "checkpoint-day-1")
    assert list(progress) == [question.id]
    assert progress[question.id].is_correct is True


def test_answer_rejects_bad_index(ctx, user_id):
    question = get_checkpoint_test_for_day(1).questions[0]
    assert record_checkpoint_answer(user_id, question, len(question.choices_json))["ok"] is False
    assert get_checkpoint_progress(user_id, "checkpoint-day-1") == {}


def test_pass_pays_xp_once(ctx, user_id):
    test = get_checkpoint_test_for_day(1)
    _answer(user_id, test, 6)

    first = finalize_checkpoint_attempt(user_id, test)
    assert first == {"score": 100, "passed": True, "total_questions": 6, "correct_count": 6, "xp_awarded": 15}
    second = finalize_checkpoint_attempt(user_id, test)
    assert second["passed"] is True
    assert second["xp_awarded"] == 0

    assert db.session.get(UserProgress, user_id).xp == 15
    assert CheckpointAttempt.query.filter_by(user_id=user_id).count() == 2
    assert has_passed_checkpoint(user_id, test.id)


def test_fail_then_retry(ctx, user_id):
    test = get_checkpoint_test_for_day(1)
    _answer(user_id, test, 4)

    failed = finalize_checkpoint_attempt(user_id, test)
    assert (failed["score"], failed["passed"], failed["xp_awarded"]) == (67, False, 0)
    assert not has_passed_checkpoint(user_id, test.id)

    reset_checkpoint_answers(user_id, test.id)
    assert get_checkpoint_progress(user_id, test.id) == {}

    _answer(user_id, test, 5)
    passed = finalize_checkpoint_attempt(user_id, test)
    assert (passed["score"], passed["passed"], passed["xp_awarded"]) == (83, True, 15)

    latest = get_latest_checkpoint_attempt(user_id, test.id)
    assert latest.passed is True
    assert latest.score == 83


def test_unanswered_questions_count_as_wrong(ctx, user_id):
    test = get_checkpoint_test_for_day(2)
    record_checkpoint_answer(user_id, test.questions[0], test.questions[0].correct_index)
    result = finalize_checkpoint_attempt(user_id, test)
    assert (result["correct_count"], result["score"], result["passed"]) == (1, 17, False)
