import logging
from datetime import date, datetime, timedelta, timezone

from flask import current_app
from sqlalchemy import func

from models import db, UserProgress, UserDay, LessonStep, UserStepProgress, CheckpointAttempt, CheckpointTest

log = logging.getLogger(__name__)

TOTAL_DAYS = 84
XP_PER_DAY = 10

RANKS = [
    ("Beginner Analyst", 0, 60),
    ("Junior Analyst", 60, 160),
    ("Analyst", 160, 320),
    ("Senior Analyst", 320, 520),
    ("Lead Analyst", 520, 800),
]


# ── Timezone offset ───────────────────────────────────────────────────────────
# Server runs UTC; "today" is shifted by TZ_OFFSET_HOURS so streaks follow the
# learner's calendar rather than the server's.

def today_local() -> date:
    """Return the current date in the configured local timezone."""
    offset = current_app.config.get("TZ_OFFSET_HOURS", 0)
    return (datetime.now(timezone.utc) + timedelta(hours=offset)).date()


# ── Progress rows ─────────────────────────────────────────────────────────────

def ensure_progress_row(user_id: int, today: date = None) -> UserProgress:
    progress = db.session.get(UserProgress, user_id)
    if progress is None:
        progress = UserProgress(
            user_id=user_id,
            start_date=today or today_local(),
            xp=0,
            streak=0,
            longest_streak=0,
            last_completed_date=None,
        )
        db.session.add(progress)
        db.session.commit()
    return progress




def max_passed_checkpoint_day(user_id: int) -> int:
    max_day = (
        db.session.query(func.max(CheckpointTest.day_number))
        .join(CheckpointAttempt, CheckpointAttempt.checkpoint_test_id == CheckpointTest.id)
        .filter(CheckpointAttempt.user_id == user_id, CheckpointAttempt.passed.is_(True))
        .scalar()
    )
    return max_day or 0


def current_day_number(user_id: int) -> int:
    return min(max_passed_checkpoint_day(user_id) + 1, TOTAL_DAYS)


def get_completed_days(user_id: int) -> list:
    rows = UserDay.query.filter_by(user_id=user_id).order_by(UserDay.day).all()
    return [row.day for row in rows]


def has_user_day(user_id: int, day: int) -> bool:
    return db.session.get(UserDay, (user_id, day)) is not None


# ── Lesson step counts ────────────────────────────────────────────────────────

def lesson_step_counts(user_id: int, day: int):
    """Return (total_steps, completed_steps) for one lesson."""
    total = LessonStep.query.filter_by(lesson_day=day).count()
    completed = (
        UserStepProgress.query
        .join(LessonStep, LessonStep.id == UserStepProgress.step_id)
        .filter(UserStepProgress.user_id == user_id, LessonStep.lesson_day == day)
        .count()
    )
    return total, completed


def is_lesson_steps_complete(user_id: int, day: int) -> bool:
    total, completed = lesson_step_counts(user_id, day)
    return total > 0 and completed >= total


def is_lesson_ready_for_checkpoint(user_id: int, day: int) -> bool:
    return has_user_day(user_id, day) or is_lesson_steps_complete(user_id, day)


# ── Streak & completion ───────────────────────────────────────────────────────

def reset_streak_if_missed(progress: UserProgress, today: date) -> UserProgress:
    last = progress.last_completed_date
    if last is None:
        return progress
    yesterday = today - timedelta(days=1)
    if last not in (today, yesterday) and progress.streak != 0:
        log.info("Streak reset for user %s (last completed %s)", progress.user_id, last)
        progress.streak = 0
        db.session.commit()
    return progress


def record_lesson_completion(user_id: int, day: int, progress: UserProgress, today: date) -> str:
    """Mark a day complete and pay out its XP. Returns "already" or "completed"."""
    if has_user_day(user_id, day):
        return "already"

    yesterday = today - timedelta(days=1)
    if progress.last_completed_date == yesterday:
        progress.streak += 1
    elif progress.last_completed_date == today:
        pass  # Second completion today keeps the streak as is
    else:
        progress.streak = 1

    progress.xp += XP_PER_DAY
    progress.last_completed_date = today
    if progress.streak > progress.longest_streak:
        progress.longest_streak = progress.streak

    db.session.add(UserDay(user_id=user_id, day=day, completed_date=today))
    db.session.commit()
    log.info("User %s completed day %s: xp=%s streak=%s", user_id, day, progress.xp, progress.streak)
    return "completed"


def get_dashboard_data(user_id: int, today: date = None) -> dict:
    today = today or today_local()
    progress = reset_streak_if_missed(ensure_progress_row(user_id, today), today)
    max_passed = max_passed_checkpoint_day(user_id)
    day_number = min(max_passed + 1, TOTAL_DAYS)
    completed_all = max_passed >= TOTAL_DAYS

    has_day = has_user_day(user_id, day_number)
    steps_complete = not completed_all and is_lesson_steps_complete(user_id, day_number)
    lesson_completed = not completed_all and (has_day or steps_complete)
    if steps_complete and not has_day:
        record_lesson_completion(user_id, day_number, progress, today)
    checkpoint_passed = max_passed >= day_number

    return {
        "day_number": day_number,
        "total_days": TOTAL_DAYS,
        "xp": progress.xp,
        "streak": progress.streak,
        "longest_streak": progress.longest_streak,
        "today": today,
        "lesson_completed": lesson_completed,
        "checkpoint_passed": checkpoint_passed,
        "can_complete": not completed_all and not lesson_completed,
        "can_take_checkpoint": not completed_all and lesson_completed and not checkpoint_passed,
        "completed_all": completed_all,
        "today_completed": progress.last_completed_date == today,
    }


def complete_today(user_id: int, today: date = None) -> str:
    today = today or today_local()
    progress = ensure_progress_row(user_id, today)
    max_passed = max_passed_checkpoint_day(user_id)
    if max_passed >= TOTAL_DAYS:
        return "finished"
    return record_lesson_completion(user_id, min(max_passed + 1, TOTAL_DAYS), progress, today)


# ── Ranks ─────────────────────────────────────────────────────────────────────

def get_rank(xp: int) -> dict:
    """Rank name plus progress toward the next one (0.0 - 1.0)."""
    name, low, high = RANKS[-1]
    for rank in RANKS:
        if xp < rank[2]:
            name, low, high = rank
            break
    progress = min(1.0, max(0.0, (xp - low) / (high - low)))
    index = [r[0] for r in RANKS].index(name)
    next_name = RANKS[index + 1][0] if index + 1 < len(RANKS) else None
    return {
        "name": name,
        "min_xp": low,
        "max_xp": high,
        "progress": progress,
        "percent": int(progress * 100),
        "next_name": next_name,
        "xp_to_next": max(0, high - xp),
    }
