import json

from models import db, Lesson, LessonStep, UserStepProgress
from seeding import ensure_content_seeded

READ_STEP_TYPES = ("intuition", "learn", "visual")
QUESTION_STEP_TYPES = ("mcq", "fix")
VISUAL_TYPES = ("table", "bar", "line")


def parse_visual(value):
    """Return a visual dict ({"type": "table"|"bar"|"line", ...}) or None.

    Accepts the stored JSON column value or a raw JSON string.
    """
    if not value:
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, dict) or value.get("type") not in VISUAL_TYPES:
        return None
    return value


def get_lesson_for_day(day: int):
    ensure_content_seeded()
    return db.session.get(Lesson, day)


def get_step_by_id(step_id: int):
    ensure_content_seeded()
    return db.session.get(LessonStep, step_id)


def get_step_progress_for_day(user_id: int, day: int) -> dict:
    ensure_content_seeded()
    rows = (
        UserStepProgress.query
        .join(LessonStep, LessonStep.id == UserStepProgress.step_id)
        .filter(UserStepProgress.user_id == user_id, LessonStep.lesson_day == day)
        .all()
    )
    return {row.step_id: row for row in rows}


def _get_step_progress(user_id: int, step_id: int):
    return UserStepProgress.query.filter_by(user_id=user_id, step_id=step_id).first()


def record_learn_step(user_id: int, step_id: int):
    """Mark a read-only step as seen. Returns the progress row, or None for a wrong step type."""
    step = get_step_by_id(step_id)
    if step is None or step.type not in READ_STEP_TYPES:
        return None
    existing = _get_step_progress(user_id, step_id)
    if existing is not None:
        return existing
    row = UserStepProgress(user_id=user_id, step_id=step_id, selected_index=None, is_correct=None)
    db.session.add(row)
    db.session.commit()
    return row


def record_answer(user_id: int, step_id: int, selected_index: int):
    """Record the answer to an mcq/fix step. The first answer sticks.

    Returns the progress row, or None when the step is not a question or the
    index is outside its choices.
    """
    step = get_step_by_id(step_id)
    if step is None or step.type not in QUESTION_STEP_TYPES:
        return None
    choices = step.choices or []
    if not 0 <= selected_index < len(choices):
        return None
    existing = _get_step_progress(user_id, step_id)
    if existing is not None:
        return existing
    row = UserStepProgress(
        user_id=user_id,
        step_id=step_id,
        selected_index=selected_index,
        is_correct=selected_index == step.correct_index,
    )
    db.session.add(row)
    db.session.commit()
    return row
