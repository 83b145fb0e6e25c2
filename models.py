from flask_sqlalchemy import SQLAlchemy
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime, timezone

db = SQLAlchemy()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ── Accounts ──────────────────────────────────────────────────────────────────

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    sessions = db.relationship("AuthSession", backref="user", lazy=True, cascade="all, delete-orphan")
    progress = db.relationship("UserProgress", backref="user", uselist=False, cascade="all, delete-orphan")

    def set_password(self, plaintext: str):
        self.password_hash = generate_password_hash(plaintext)

    def check_password(self, plaintext: str) -> bool:
        return check_password_hash(self.password_hash, plaintext)

    def __repr__(self):
        return f"<User {self.email}>"


class AuthSession(db.Model):
    __tablename__ = "sessions"

    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<AuthSession user={self.user_id} expires={self.expires_at:%Y-%m-%d %H:%M}>"


# ── Progress ──────────────────────────────────────────────────────────────────

class UserProgress(db.Model):
    __tablename__ = "user_progress"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    start_date = db.Column(db.Date, nullable=False)
    xp = db.Column(db.Integer, nullable=False, default=0)
    streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    last_completed_date = db.Column(db.Date, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<UserProgress user={self.user_id} xp={self.xp} streak={self.streak}>"


class UserDay(db.Model):
    __tablename__ = "user_days"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    day = db.Column(db.Integer, primary_key=True)
    completed_date = db.Column(db.Date, nullable=False)

    def __repr__(self):
        return f"<UserDay user={self.user_id} day={self.day}>"


# ── Lessons ───────────────────────────────────────────────────────────────────

class Lesson(db.Model):
    __tablename__ = "lessons"

    day = db.Column(db.Integer, primary_key=True, autoincrement=False)
    title = db.Column(db.Text, nullable=False)
    micro_goal = db.Column(db.Text, nullable=False)
    recap_bullets = db.Column(db.JSON, nullable=True)
    real_world_line = db.Column(db.Text, nullable=True)

    steps = db.relationship(
        "LessonStep", backref="lesson", lazy=True, cascade="all, delete-orphan",
        order_by="LessonStep.sort_order",
    )

    def __repr__(self):
        return f"<Lesson {self.day} {self.title!r}>"


class LessonStep(db.Model):
    __tablename__ = "lesson_steps"
    __table_args__ = (db.UniqueConstraint("lesson_day", "sort_order", name="lesson_steps_day_sort_idx"),)

    id = db.Column(db.Integer, primary_key=True)
    lesson_day = db.Column(db.Integer, db.ForeignKey("lessons.day", ondelete="CASCADE"), nullable=False, index=True)
    sort_order = db.Column(db.Integer, nullable=False)
    type = db.Column(db.String(20), nullable=False)   # intuition | learn | visual | mcq | fix
    title = db.Column(db.Text, nullable=True)
    body = db.Column(db.Text, nullable=True)
    example = db.Column(db.Text, nullable=True)
    prompt = db.Column(db.Text, nullable=True)
    choices = db.Column(db.JSON, nullable=True)
    correct_index = db.Column(db.Integer, nullable=True)
    explanation = db.Column(db.Text, nullable=True)
    visual_json = db.Column(db.JSON, nullable=True)

    @property
    def is_question(self) -> bool:
        return self.type in ("mcq", "fix")

    def __repr__(self):
        return f"<LessonStep day={self.lesson_day} #{self.sort_order} {self.type}>"


class UserStepProgress(db.Model):
    __tablename__ = "user_step_progress"
    __table_args__ = (db.UniqueConstraint("user_id", "step_id"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    step_id = db.Column(db.Integer, db.ForeignKey("lesson_steps.id", ondelete="CASCADE"), nullable=False)
    selected_index = db.Column(db.Integer, nullable=True)   # NULL for read-only steps
    is_correct = db.Column(db.Boolean, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=False, default=_utcnow)


# ── Skill checks ──────────────────────────────────────────────────────────────

class SkillCheck(db.Model):
    __tablename__ = "skill_checks"

    id = db.Column(db.String(64), primary_key=True)
    day_number = db.Column(db.Integer, nullable=False, index=True)
    title = db.Column(db.Text, nullable=False)
    prompt = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(10), nullable=False)
    choices_json = db.Column(db.JSON, nullable=False)
    answer_json = db.Column(db.JSON, nullable=False)
    explanation = db.Column(db.Text, nullable=False)
    xp_reward = db.Column(db.Integer, nullable=False, default=5)

    @property
    def correct_index(self) -> int:
        return (self.answer_json or {}).get("correct_index", 0)

    def __repr__(self):
        return f"<SkillCheck {self.id}>"


class UserSkillCheckAnswer(db.Model):
    """Latest answer a user gave to a skill check."""
    __tablename__ = "user_skill_checks"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    skill_check_id = db.Column(db.String(64), primary_key=True)
    selected_index = db.Column(db.Integer, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=False, default=_utcnow)


class UserSkillCheckCompletion(db.Model):
    __tablename__ = "user_skill_check_completions"
    __table_args__ = (db.UniqueConstraint("user_id", "skill_check_id"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_check_id = db.Column(db.String(64), db.ForeignKey("skill_checks.id", ondelete="CASCADE"), nullable=False)
    completed_at = db.Column(db.DateTime, nullable=False, default=_utcnow)


# ── Patterns ──────────────────────────────────────────────────────────────────

class Pattern(db.Model):
    __tablename__ = "patterns"

    id = db.Column(db.String(64), primary_key=True)
    day_number = db.Column(db.Integer, nullable=False, index=True)
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    content_json = db.Column(db.JSON, nullable=False)

    def __repr__(self):
        return f"<Pattern {self.id}>"


class UserPatternCompletion(db.Model):
    __tablename__ = "user_pattern_completions"
    __table_args__ = (db.UniqueConstraint("user_id", "pattern_id"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    pattern_id = db.Column(db.String(64), db.ForeignKey("patterns.id", ondelete="CASCADE"), nullable=False)
    completed_at = db.Column(db.DateTime, nullable=False, default=_utcnow)


# ── Checkpoints ───────────────────────────────────────────────────────────────

class CheckpointTest(db.Model):
    __tablename__ = "checkpoint_tests"

    id = db.Column(db.String(64), primary_key=True)
    day_number = db.Column(db.Integer, nullable=False, unique=True)
    title = db.Column(db.Text, nullable=False)
    pass_percent = db.Column(db.Integer, nullable=False, default=70)
    xp_reward = db.Column(db.Integer, nullable=False, default=15)

    questions = db.relationship(
        "CheckpointQuestion", backref="test", lazy=True, cascade="all, delete-orphan",
        order_by="CheckpointQuestion.id",
    )

    def __repr__(self):
        return f"<CheckpointTest {self.id}>"


class CheckpointQuestion(db.Model):
    __tablename__ = "checkpoint_questions"

    id = db.Column(db.String(80), primary_key=True)
    checkpoint_test_id = db.Column(
        db.String(64), db.ForeignKey("checkpoint_tests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = db.Column(db.String(10), nullable=False)
    prompt = db.Column(db.Text, nullable=False)
    choices_json = db.Column(db.JSON, nullable=False)
    answer_json = db.Column(db.JSON, nullable=False)
    explanation = db.Column(db.Text, nullable=False)
    difficulty = db.Column(db.String(10), nullable=False)

    @property
    def correct_index(self) -> int:
        return (self.answer_json or {}).get("correct_index", 0)


class CheckpointAttempt(db.Model):
    __tablename__ = "checkpoint_attempts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    checkpoint_test_id = db.Column(
        db.String(64), db.ForeignKey("checkpoint_tests.id", ondelete="CASCADE"), nullable=False
    )
    score = db.Column(db.Integer, nullable=False)
    passed = db.Column(db.Boolean, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<CheckpointAttempt {self.checkpoint_test_id} score={self.score} passed={self.passed}>"


class CheckpointAnswer(db.Model):
    __tablename__ = "checkpoint_answers"
    __table_args__ = (db.UniqueConstraint("user_id", "question_id"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    checkpoint_test_id = db.Column(
        db.String(64), db.ForeignKey("checkpoint_tests.id", ondelete="CASCADE"), nullable=False
    )
    question_id = db.Column(
        db.String(80), db.ForeignKey("checkpoint_questions.id", ondelete="CASCADE"), nullable=False
    )
    selected_index = db.Column(db.Integer, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    answered_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


# ── Seed bookkeeping ──────────────────────────────────────────────────────────

class ContentSeed(db.Model):
    __tablename__ = "content_seed"

    version = db.Column(db.Integer, primary_key=True, autoincrement=False)
    seeded_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
