from lessons import get_lesson_for_day, get_step_progress_for_day, parse_visual, record_answer, record_learn_step
from models import UserStepProgress


def _steps_by_type(day=1):
    steps = get_lesson_for_day(day).steps
    intuition = next(step for step in steps if step.type == "intuition")
    question = next(step for step in steps if step.is_question)
    return intuition, question


def test_learn_step_is_recorded_once(ctx, user_id):
    intuition, _ = _steps_by_type()
    first = record_learn_step(user_id, intuition.id)
    second = record_learn_step(user_id, intuition.id)
    assert first.id == second.id
    assert first.selected_index is None
    assert UserStepProgress.query.filter_by(user_id=user_id).count() == 1


def test_learn_step_rejects_question(ctx, user_id):
    _, question = _steps_by_type()
    assert record_learn_step(user_id, question.id) is None
    assert record_learn_step(user_id, 999999) is None


def test_answer_rejects_read_step_and_bad_index(ctx, user_id):
    intuition, question = _steps_by_type()
    assert record_answer(user_id, intuition.id, 0) is None
    assert record_answer(user_id, question.id, -1) is None
    assert record_answer(user_id, question.id, len(question.choices)) is None
    assert UserStepProgress.query.filter_by(user_id=user_id).count() == 0


def test_first_answer_sticks(ctx, user_id):
    _, question = _steps_by_type()
    wrong = (question.correct_index + 1) % len(question.choices)

    row = record_answer(user_id, question.id, wrong)
    assert row.is_correct is False

    again = record_answer(user_id, question.id, question.correct_index)
    assert again.id == row.id
    assert again.selected_index == wrong
    assert again.is_correct is False


def test_step_progress_is_scoped_to_day(ctx, user_id):
    intuition, _ = _steps_by_type(1)
    other, _ = _steps_by_type(2)
    record_learn_step(user_id, intuition.id)
    record_learn_step(user_id, other.id)

    assert list(get_step_progress_for_day(user_id, 1)) == [intuition.id]


def test_parse_visual():
    table = {"type": "table", "headers": ["a", "b"], "rows": []}
    assert parse_visual(table) is table
    assert parse_visual('{"type": "bar", "values": [1, 2]}')["type"] == "bar"
    assert parse_visual(None) is None
    assert parse_visual("not json") is None
    assert parse_visual({"type": "pie"}) is None
    assert parse_visual("[1, 2]") is None
