from datetime import date, datetime, timedelta, timezone

from models import db, CheckpointAttempt, UserDay
from progress import (
    TOTAL_DAYS, complete_today, current_day_number, ensure_progress_row, get_dashboard_data,
    get_rank, is_lesson_ready_for_checkpoint, lesson_step_counts, record_lesson_completion,
    reset_streak_if_missed, today_local,
)

TODAY = date(2026, 3, 10)
YESTERDAY = TODAY - timedelta(days=1)


def test_new_user_starts_on_day_one(ctx, user_id):
    progress = ensure_progress_row(user_id, TODAY)
    assert progress.start_date == TODAY
    assert (progress.xp, progress.streak, progress.longest_streak) == (0, 0, 0)
    assert current_day_number(user_id) == 1


def test_first_completion_starts_streak(ctx, user_id):
    progress = ensure_progress_row(user_id, TODAY)
    assert record_lesson_completion(user_id, 1, progress, TODAY) == "completed"
    assert (progress.xp, progress.streak, progress.longest_streak) == (10, 1, 1)
    assert progress.last_completed_date == TODAY
    assert db.session.get(UserDay, (user_id, 1)).completed_date == TODAY


def test_completing_same_day_twice_pays_once(ctx, user_id):
    progress = ensure_progress_row(user_id, TODAY)
    record_lesson_completion(user_id, 1, progress, TODAY)
    assert record_lesson_completion(user_id, 1, progress, TODAY) == "already"
    assert progress.xp == 10
    assert UserDay.query.filter_by(user_id=user_id).count() == 1


def test_streak_grows_after_yesterday(ctx, user_id):
    progress = ensure_progress_row(user_id, TODAY)
    progress.streak, progress.longest_streak, progress.last_completed_date = 3, 3, YESTERDAY
    db.session.commit()

    record_lesson_completion(user_id, 4, progress, TODAY)
    assert (progress.streak, progress.longest_streak) == (4, 4)


def test_second_lesson_same_day_keeps_streak(ctx, user_id):
    progress = ensure_progress_row(user_id, TODAY)
    progress.streak, progress.longest_streak, progress.last_completed_date = 2, 5, TODAY
    db.session.commit()

    record_lesson_completion(user_id, 3, progress, TODAY)
    assert (progress.streak, progress.longest_streak, progress.xp) == (2, 5, 10)


def test_gap_restarts_streak(ctx, user_id):
    progress = ensure_progress_row(user_id, TODAY)
    progress.streak, progress.longest_streak, progress.last_completed_date = 6, 6, TODAY - timedelta(days=3)
    db.session.commit()

    record_lesson_completion(user_id, 7, progress, TODAY)
    assert (progress.streak, progress.longest_streak) == (1, 6)


def test_reset_streak_if_missed(ctx, user_id):
    progress = ensure_progress_row(user_id, TODAY)
    assert reset_streak_if_missed(progress, TODAY).streak == 0

    progress.streak, progress.last_completed_date = 4, YESTERDAY
    assert reset_streak_if_missed(progress, TODAY).streak == 4

    progress.last_completed_date = TODAY - timedelta(days=2)
    assert reset_streak_if_missed(progress, TODAY).streak == 0


def test_dashboard_for_new_user(ctx, user_id):
    data = get_dashboard_data(user_id, TODAY)
    assert data["day_number"] == 1
    assert data["total_days"] == TOTAL_DAYS
    assert data["can_complete"] is True
    assert data["lesson_completed"] is False
    assert data["can_take_checkpoint"] is False
    assert data["today_completed"] is False


def test_dashboard_records_finished_steps(ctx, user_id, finish_steps):
    assert lesson_step_counts(user_id, 1) == (10, 0)
    assert not is_lesson_ready_for_checkpoint(user_id, 1)

    finish_steps(user_id, 1, correct=False)
    assert lesson_step_counts(user_id, 1) == (10, 10)
    assert is_lesson_ready_for_checkpoint(user_id, 1)

    data = get_dashboard_data(user_id, TODAY)
    assert data["lesson_completed"] is True
    assert data["can_take_checkpoint"] is True
    assert data["today_completed"] is True
    assert (data["xp"], data["streak"]) == (10, 1)

    # A second load does not pay again.
    assert get_dashboard_data(user_id, TODAY)["xp"] == 10


def test_day_advances_only_after_checkpoint(ctx, user_id, finish_steps, pass_checkpoint):
    finish_steps(user_id, 1)
    get_dashboard_data(user_id, TODAY)
    assert current_day_number(user_id) == 1

    pass_checkpoint(user_id, 1)
    data = get_dashboard_data(user_id, TODAY)
    assert data["day_number"] == 2
    assert data["lesson_completed"] is False
    assert data["checkpoint_passed"] is False


def test_complete_today_marks_current_day(ctx, user_id):
    assert complete_today(user_id, TODAY) == "completed"
    assert complete_today(user_id, TODAY) == "already"


def test_everything_passed(ctx, user_id):
    ensure_progress_row(user_id, TODAY)
    db.session.add(CheckpointAttempt(user_id=user_id, checkpoint_test_id="checkpoint-day-84", score=100, passed=True))
    db.session.commit()

    assert complete_today(user_id, TODAY) == "finished"
    data = get_dashboard_data(user_id, TODAY)
    assert data["completed_all"] is True
    assert data["day_number"] == TOTAL_DAYS
    assert data["can_complete"] is False
    assert data["can_take_checkpoint"] is False


def test_rank_thresholds():
    assert get_rank(0)["name"] == "Beginner Analyst"
    assert get_rank(59)["name"] == "Beginner Analyst"
    assert get_rank(60)["name"] == "Junior Analyst"

    junior = get_rank(110)
    assert junior["percent"] == 50
    assert junior["next_name"] == "Analyst"
    assert junior["xp_to_next"] == 50


def test_top_rank_is_capped():
    rank = get_rank(5000)
    assert rank["name"] == "Lead Analyst"
    assert rank["progress"] == 1.0
    assert rank["next_name"] is None
    assert rank["xp_to_next"] == 0


def test_two_completions_on_one_day_after_yesterday(ctx, user_id):
    progress = ensure_progress_row(user_id, YESTERDAY)
    record_lesson_completion(user_id, 1, progress, YESTERDAY)
    record_lesson_completion(user_id, 2, progress, TODAY)
    record_lesson_completion(user_id, 3, progress, TODAY)
    assert (progress.streak, progress.longest_streak, progress.xp) == (2, 2, 30)


def test_today_local_accepts_fractional_offset(app, ctx, monkeypatch):
    monkeypatch.setitem(app.config, "TZ_OFFSET_HOURS", -3.5)
    before = (datetime.now(timezone.utc) - timedelta(hours=3.5)).date()
    result = today_local()
    after = (datetime.now(timezone.utc) - timedelta(hours=3.5)).date()
    assert result in (before, after)


def test_timezone_offset_is_parsed_as_hours(app):
    assert isinstance(app.config["TZ_OFFSET_HOURS"], float)
