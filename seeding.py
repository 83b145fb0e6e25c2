import logging

from sqlalchemy.exc import IntegrityError

from models import (
    db, Lesson, LessonStep, SkillCheck, Pattern, CheckpointTest, CheckpointQuestion, ContentSeed,
)
from curriculum import ContentCheckError, build_program_content, lint_program_content

log = logging.getLogger(__name__)

# Bump when curriculum.py changes in a way existing databases must pick up.
CONTENT_SEED_VERSION = 1

_seeded = False


def _expected_counts(content):
    return {
        Lesson: len(content["lessons"]),
        LessonStep: sum(len(lesson["steps"]) for lesson in content["lessons"]),
        SkillCheck: len(content["skill_checks"]),
        Pattern: len(content["patterns"]),
        CheckpointTest: len(content["checkpoint_tests"]),
        CheckpointQuestion: sum(len(test["questions"]) for test in content["checkpoint_tests"]),
    }


def _seed_is_current(content) -> bool:
    if db.session.get(ContentSeed, CONTENT_SEED_VERSION) is None:
        return False
    return all(model.query.count() >= expected for model, expected in _expected_counts(content).items())


def _upsert_lessons(lessons):
    for data in lessons:
        lesson = db.session.merge(Lesson(
            day=data["day"],
            title=data["title"],
            micro_goal=data["micro_goal"],
            recap_bullets=data["recap_bullets"],
            real_world_line=data["real_world_line"],
        ))
        existing = {step.sort_order: step for step in lesson.steps}
        for sort_order, step_data in enumerate(data["steps"], start=1):
            step = existing.get(sort_order)
            if step is None:
                step = LessonStep(sort_order=sort_order)
                lesson.steps.append(step)
            step.type = step_data["type"]
            step.title = step_data.get("title")
            step.body = step_data.get("body")
            step.example = step_data.get("example")
            step.prompt = step_data.get("prompt")
            step.choices = step_data.get("choices")
            step.correct_index = step_data.get("correct_index")
            step.explanation = step_data.get("explanation")
            step.visual_json = step_data.get("visual")


def _upsert_skill_checks(checks):
    for check in checks:
        db.session.merge(SkillCheck(
            id=check["id"],
            day_number=check["day_number"],
            title=check["title"],
            prompt=check["prompt"],
            type=check["type"],
            choices_json=check["choices"],
            answer_json=check["answer"],
            explanation=check["explanation"],
            xp_reward=check["xp_reward"],
        ))


def _upsert_patterns(patterns):
    for pattern in patterns:
        db.session.merge(Pattern(
            id=pattern["id"],
            day_number=pattern["day_number"],
            title=pattern["title"],
            description=pattern["description"],
            content_json=pattern["content"],
        ))


def _upsert_checkpoints(tests):
    for data in tests:
        test = db.session.merge(CheckpointTest(
            id=data["id"],
            day_number=data["day_number"],
            title=data["title"],
            pass_percent=data["pass_percent"],
            xp_reward=data["xp_reward"],
        ))
        existing = {question.id: question for question in test.questions}
        for question_data in data["questions"]:
            question = existing.get(question_data["id"])
            if question is None:
                question = CheckpointQuestion(id=question_data["id"])
                test.questions.append(question)
            question.type = question_data["type"]
            question.prompt = question_data["prompt"]
            question.choices_json = question_data["choices"]
            question.answer_json = question_data["answer"]
            question.explanation = question_data["explanation"]
            question.difficulty = question_data["difficulty"]


def ensure_content_seeded():
    """Make sure the generated curriculum is in the database.

    Safe to call on every request: after the first success in this process it
    returns immediately, and a database that already holds the current
    version is left untouched. Re-running never duplicates rows because every
    row is upserted by its natural key.
    """
    global _seeded
    if _seeded:
        return

    content = build_program_content()
    if _seed_is_current(content):
        log.debug("Content seed v%s already present", CONTENT_SEED_VERSION)
        _seeded = True
        return

    issues = lint_program_content(content)
    if issues:
        log.error("Content check failed for %d day(s): %s", len(issues), issues)
        raise ContentCheckError(issues)

    try:
        _upsert_lessons(content["lessons"])
        _upsert_skill_checks(content["skill_checks"])
        _upsert_patterns(content["patterns"])
        _upsert_checkpoints(content["checkpoint_tests"])
        db.session.merge(ContentSeed(version=CONTENT_SEED_VERSION))
        db.session.commit()
    except IntegrityError:
        # Another worker seeded the same rows first.
        db.session.rollback()
        if not _seed_is_current(content):
            raise
        log.info("Content seed v%s was written by another worker", CONTENT_SEED_VERSION)
        _seeded = True
        return

    counts = {model.__tablename__: n for model, n in _expected_counts(content).items()}
    log.info("Seeded content v%s: %s", CONTENT_SEED_VERSION, counts)
    _seeded = True


def reset_seed_flag():
    """Forget that this process has seeded, so the next call checks the database again."""
    global _seeded
    _seeded = False
