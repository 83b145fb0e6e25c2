import logging

from models import db, SkillCheck, UserSkillCheckAnswer, UserSkillCheckCompletion, _utcnow
from progress import ensure_progress_row
from seeding import ensure_content_seeded

log = logging.getLogger(__name__)


def get_skill_check_by_id(check_id: str):
    ensure_content_seeded()
    return db.session.get(SkillCheck, check_id)


def get_skill_check_completion(user_id: int, check_id: str) -> bool:
    return UserSkillCheckCompletion.query.filter_by(user_id=user_id, skill_check_id=check_id).first() is not None


def get_skill_checks_for_day(user_id: int, day: int) -> list:
    ensure_content_seeded()
    checks = SkillCheck.query.filter_by(day_number=day).order_by(SkillCheck.id).all()
    done = {
        row.skill_check_id
        for row in UserSkillCheckCompletion.query.filter(
            UserSkillCheckCompletion.user_id == user_id,
            UserSkillCheckCompletion.skill_check_id.in_([c.id for c in checks]),
        )
    }
    return [{"check": check, "completed": check.id in done} for check in checks]


def record_skill_check_answer(user_id: int, check_id: str, selected_index: int) -> dict:
    """Store the latest answer; the first correct one completes the check and pays its XP."""
    check = get_skill_check_by_id(check_id)
    if check is None or not 0 <= selected_index < len(check.choices_json or []):
        return {"ok": False, "correct": False, "xp_awarded": 0}

    progress = ensure_progress_row(user_id)
    is_correct = selected_index == check.correct_index

    answer = db.session.get(UserSkillCheckAnswer, (user_id, check.id))
    if answer is None:
        answer = UserSkillCheckAnswer(user_id=user_id, skill_check_id=check.id)
        db.session.add(answer)
    answer.selected_index = selected_index
    answer.is_correct = is_correct
    answer.completed_at = _utcnow()

    xp_awarded = 0
    if is_correct and not get_skill_check_completion(user_id, check.id):
        db.session.add(UserSkillCheckCompletion(user_id=user_id, skill_check_id=check.id))
        xp_awarded = check.xp_reward
        progress.xp += xp_awarded
        log.info("User %s completed skill check %s (+%s XP)", user_id, check.id, xp_awarded)

    db.session.commit()
    return {"ok": True, "correct": is_correct, "xp_awarded": xp_awarded}
