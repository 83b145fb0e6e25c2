from models import db, Pattern, UserPatternCompletion
from seeding import ensure_content_seeded

EMPTY_CONTENT = {"intro": "", "sections": [], "takeaway": ""}


def pattern_content(pattern: Pattern) -> dict:
    """Return the {intro, sections, takeaway} card body, tolerating missing keys."""
    content = pattern.content_json if isinstance(pattern.content_json, dict) else {}
    return {**EMPTY_CONTENT, **content}


def get_pattern_by_id(pattern_id: str):
    ensure_content_seeded()
    return db.session.get(Pattern, pattern_id)


def get_patterns_for_day(user_id: int, day: int) -> list:
    ensure_content_seeded()
    patterns = Pattern.query.filter_by(day_number=day).order_by(Pattern.id).all()
    done = {
        row.pattern_id
        for row in UserPatternCompletion.query.filter(
            UserPatternCompletion.user_id == user_id,
            UserPatternCompletion.pattern_id.in_([p.id for p in patterns]),
        )
    }
    return [{"pattern": pattern, "completed": pattern.id in done} for pattern in patterns]


def is_pattern_completed(user_id: int, pattern_id: str) -> bool:
    return UserPatternCompletion.query.filter_by(user_id=user_id, pattern_id=pattern_id).first() is not None


def mark_pattern_completed(user_id: int, pattern_id: str):
    if is_pattern_completed(user_id, pattern_id):
        return
    db.session.add(UserPatternCompletion(user_id=user_id, pattern_id=pattern_id))
    db.session.commit()
