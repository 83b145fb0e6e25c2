from models import db, UserProgress, UserSkillCheckAnswer, UserPatternCompletion
from patterns import get_pattern_by_id, get_patterns_for_day, is_pattern_completed, mark_pattern_completed, pattern_content
from skill_checks import (
    get_skill_check_by_id, get_skill_check_completion, get_skill_checks_for_day, record_skill_check_answer,
)

CHECK_ID = "day-1-skill-1"


def _wrong_index(check):
    return (check.correct_index + 1) % len(check.choices_json)


def test_skill_checks_for_day(ctx, user_id):
    items = get_skill_checks_for_day(user_id, 1)
    assert [item["check"].id for item in items] == ["day-1-skill-1", "day-1-skill-2", "day-1-skill-3"]
    assert not any(item["completed"] for item in items)
    assert items[2]["check"].title == "Manager-ready line"


def test_wrong_answer_pays_nothing(ctx, user_id):
    check = get_skill_check_by_id(CHECK_ID)
    result = record_skill_check_answer(user_id, CHECK_ID, _wrong_index(check))
    assert result == {"ok": True, "correct": False, "xp_awarded": 0}
    assert not get_skill_check_completion(user_id, CHECK_ID)


def test_first_correct_answer_pays_once(ctx, user_id):
    check = get_skill_check_by_id(CHECK_ID)

    first = record_skill_check_answer(user_id, CHECK_ID, check.correct_index)
    assert first == {"ok": True, "correct": True, "xp_awarded": 5}
    second = record_skill_check_answer(user_id, CHECK_ID, check.correct_index)
    assert second["xp_awarded"] == 0

    assert db.session.get(UserProgress, user_id).xp == 5
    assert get_skill_check_completion(user_id, CHECK_ID)
    assert get_skill_checks_for_day(user_id, 1)[0]["completed"] is True


def test_latest_answer_replaces_previous(ctx, user_id):
    check = get_skill_check_by_id(CHECK_ID)
    record_skill_check_answer(user_id, CHECK_ID, check.correct_index)
    record_skill_check_answer(user_id, CHECK_ID, _wrong_index(check))

    answer = db.session.get(UserSkillCheckAnswer, (user_id, CHECK_ID))
    assert answer.selected_index == _wrong_index(check)
    assert answer.is_correct is False
    assert get_skill_check_completion(user_id, CHECK_ID)


def test_invalid_skill_check_answer(ctx, user_id):
    assert record_skill_check_answer(user_id, CHECK_ID, 99)["ok"] is False
    assert record_skill_check_answer(user_id, "day-999-skill-1", 0)["ok"] is False


def test_patterns_for_day(ctx, user_id):
    items = get_patterns_for_day(user_id, 1)
    assert [item["pattern"].id for item in items] == ["day-1-pattern-1", "day-1-pattern-2"]
    assert items[0]["pattern"].title == "Good vs bad: Good questions vs bad questions"

    content = pattern_content(items[0]["pattern"])
    assert content["takeaway"].startswith("What you'd tell your manager:")
    assert content["sections"][0]["visual"]["type"] == "table"


def test_pattern_completion_is_idempotent(ctx, user_id):
    mark_pattern_completed(user_id, "day-1-pattern-1")
    mark_pattern_completed(user_id, "day-1-pattern-1")

    assert is_pattern_completed(user_id, "day-1-pattern-1")
    assert UserPatternCompletion.query.filter_by(user_id=user_id).count() == 1
    assert get_patterns_for_day(user_id, 1)[0]["completed"] is True
    assert db.session.get(UserProgress, user_id) is None


def test_pattern_content_tolerates_missing_keys(ctx):
    pattern = get_pattern_by_id("day-1-pattern-2")
    pattern.content_json = {"intro": "Only an intro"}
    assert pattern_content(pattern) == {"intro": "Only an intro", "sections": [], "takeaway": ""}
    db.session.rollback()
