import os
import logging
from functools import wraps
from datetime import timedelta
from dotenv import load_dotenv
from flask import Flask, render_template, redirect, url_for, request, flash, session
from models import db
from auth import (
    SESSION_KEY, normalize_email, get_user_by_email, create_user, verify_user,
    create_session, get_session_user, delete_session,
)
from curriculum import ContentCheckError
from progress import (
    TOTAL_DAYS, get_dashboard_data, get_completed_days, complete_today, get_rank,
    is_lesson_ready_for_checkpoint,
)
from lessons import (
    READ_STEP_TYPES, get_lesson_for_day, get_step_by_id, get_step_progress_for_day,
    record_learn_step, record_answer, parse_visual,
)
from skill_checks import (
    get_skill_check_by_id, get_skill_check_completion, get_skill_checks_for_day, record_skill_check_answer,
)
from patterns import get_pattern_by_id, get_patterns_for_day, is_pattern_completed, mark_pattern_completed, pattern_content
from checkpoints import (
    get_checkpoint_test_for_day, get_checkpoint_progress, has_passed_checkpoint,
    get_latest_checkpoint_attempt, record_checkpoint_answer, finalize_checkpoint_attempt, reset_checkpoint_answers,
)

load_dotenv()

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

basedir = os.path.abspath(os.path.dirname(__file__))

app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")
app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(basedir, "analyst_path.db"),
)
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
app.config["SESSION_TTL_DAYS"] = int(os.environ.get("SESSION_TTL_DAYS", 7))
# Server runs UTC; set to e.g. -8 or 5.5 to roll "today" over at local midnight.
app.config["TZ_OFFSET_HOURS"] = float(os.environ.get("TZ_OFFSET_HOURS", 0))
app.config["SESSION_COOKIE_HTTPONLY"] = True
app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
app.permanent_session_lifetime = timedelta(days=app.config["SESSION_TTL_DAYS"])

db.init_app(app)


@app.template_filter("question_tag")
def question_tag_filter(step_type):
    return "Fix the mistake" if step_type == "fix" else "Multiple choice"


# ── Examples library ──────────────────────────────────────────────────────────

EXAMPLE_CARDS = [
    {
        "id": "charts",
        "title": "Good vs bad charts",
        "blurb": "Honest axes, clear scales, no clutter.",
        "points": [
            "Start axes at zero when possible.",
            "Label trends, not decorations.",
            "One message per chart.",
        ],
    },
    {
        "id": "cleaning",
        "title": "Clean vs messy data",
        "blurb": "Small fixes make numbers trustworthy.",
        "points": [
            "Normalize categories and casing.",
            "Remove duplicates before analysis.",
            "Check dates and missing values.",
        ],
    },
    {
        "id": "manager",
        "title": "What analysts send to managers",
        "blurb": "Short, clear, action-ready updates.",
        "points": [
            "Lead with the decision needed.",
            "State the metric and timeframe.",
            "Offer one clear recommendation.",
        ],
    },
]


# ── Helpers ───────────────────────────────────────────────────────────────────

def current_user():
    """Return the logged-in User object, or None."""
    return get_session_user(session.get(SESSION_KEY))


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if current_user() is None:
            session.pop(SESSION_KEY, None)
            flash("Please log in to continue.", "error")
            return redirect(url_for("login"))
        return f(*args, **kwargs)
    return decorated


def start_session(user):
    auth_session = create_session(user.id)
    session.clear()
    session.permanent = True
    session[SESSION_KEY] = auth_session.id


def form_int(name):
    """Read an integer form field; None when missing or malformed."""
    try:
        return int(request.form.get(name, ""))
    except ValueError:
        return None


@app.errorhandler(ContentCheckError)
def content_unavailable(error):
    db.session.rollback()
    app.logger.error("Content unavailable: %s", error)
    return render_template("error.html", message="Lesson content is unavailable right now."), 503


# ── Auth routes ───────────────────────────────────────────────────────────────

@app.route("/login", methods=["GET", "POST"])
def login():
    if current_user():
        return redirect(url_for("dashboard"))
    error = None
    email = ""
    if request.method == "POST":
        email = normalize_email(request.form.get("email", ""))
        password = request.form.get("password", "")
        if not email or not password:
            error = "Email and password are required."
        else:
            user = verify_user(email, password)
            if user:
                start_session(user)
                app.logger.info("User %s logged in", user.email)
                return redirect(url_for("dashboard"))
            app.logger.warning("Failed login for %s", email)
            error = "Invalid email or password."
    return render_template("login.html", error=error, email=email)


@app.route("/register", methods=["GET", "POST"])
def register():
    if current_user():
        return redirect(url_for("dashboard"))
    error = None
    email = ""
    if request.method == "POST":
        email = normalize_email(request.form.get("email", ""))
        password = request.form.get("password", "")
        if not email or not password:
            error = "Email and password are required."
        elif len(password) < 6:
            error = "Password must be at least 6 characters."
        elif get_user_by_email(email):
            error = "Email is already registered."
        else:
            user = create_user(email, password)
            start_session(user)
            return redirect(url_for("dashboard"))
    return render_template("register.html", error=error, email=email)


@app.route("/logout", methods=["POST"])
def logout():
    token = session.pop(SESSION_KEY, None)
    if token:
        delete_session(token)
        app.logger.info("Session ended")
    return redirect(url_for("login"))


@app.context_processor
def inject_user():
    return {"me": current_user()}


# ── Dashboard ─────────────────────────────────────────────────────────────────

@app.route("/")
def index():
    return redirect(url_for("dashboard"))


@app.route("/dashboard")
@login_required
def dashboard():
    user = current_user()
    data = get_dashboard_data(user.id)
    day_number = data["day_number"]
    completed = set(get_completed_days(user.id))

    week_start = (day_number - 1) // 7 * 7 + 1
    week_days = [
        {
            "day": day,
            "completed": day in completed,
            "current": day == day_number,
            "locked": day != day_number and day not in completed,
        }
        for day in range(week_start, week_start + 7)
    ]

    return render_template(
        "dashboard.html",
        data=data,
        rank=get_rank(data["xp"]),
        week_number=(day_number - 1) // 7 + 1,
        week_start=week_start,
        week_days=week_days,
        skill_checks=get_skill_checks_for_day(user.id, day_number),
        patterns=get_patterns_for_day(user.id, day_number),
        examples=EXAMPLE_CARDS,
    )


# ── Lesson ────────────────────────────────────────────────────────────────────

@app.route("/lesson")
@login_required
def lesson():
    user = current_user()
    data = get_dashboard_data(user.id)
    if data["completed_all"]:
        flash(f"You finished all {TOTAL_DAYS} days. Amazing work.", "success")
        return redirect(url_for("dashboard"))

    lesson_obj = get_lesson_for_day(data["day_number"])
    if lesson_obj is None:
        return redirect(url_for("dashboard"))

    progress = get_step_progress_for_day(user.id, lesson_obj.day)
    steps = lesson_obj.steps
    show_id = request.args.get("show", type=int)

    step = None
    if show_id is not None and show_id in progress:
        step = next((s for s in steps if s.id == show_id), None)
    if step is None:
        step = next((s for s in steps if s.id not in progress), None)

    return render_template(
        "lesson.html",
        data=data,
        lesson=lesson_obj,
        step=step,
        step_index=steps.index(step) + 1 if step else len(steps),
        total_steps=len(steps),
        step_progress=progress.get(step.id) if step else None,
        visual=parse_visual(step.visual_json) if step else None,
        lesson_complete=len(progress) >= len(steps),
    )


def _step_for_today(user, step_id):
    """Return the step when it belongs to the user's current day, else None."""
    if step_id is None:
        return None
    step = get_step_by_id(step_id)
    if step is None:
        return None
    if step.lesson_day != get_dashboard_data(user.id)["day_number"]:
        return None
    return step


@app.route("/lesson/answer", methods=["POST"])
@login_required
def lesson_answer():
    user = current_user()
    step = _step_for_today(user, form_int("step_id"))
    if step is None or not step.is_question:
        flash("That step is not part of today's lesson.", "error")
        return redirect(url_for("dashboard"))
    answer_index = form_int("answer_index")
    if answer_index is None or record_answer(user.id, step.id, answer_index) is None:
        flash("Pick one of the answers.", "error")
        return redirect(url_for("lesson"))
    return redirect(url_for("lesson", show=step.id))


@app.route("/lesson/continue", methods=["POST"])
@login_required
def lesson_continue():
    user = current_user()
    step = _step_for_today(user, form_int("step_id"))
    if step is None:
        flash("That step is not part of today's lesson.", "error")
        return redirect(url_for("dashboard"))
    if step.type in READ_STEP_TYPES:
        record_learn_step(user.id, step.id)
    return redirect(url_for("lesson"))


@app.route("/lesson/complete", methods=["POST"])
@login_required
def lesson_complete():
    user = current_user()
    data = get_dashboard_data(user.id)
    lesson_obj = get_lesson_for_day(data["day_number"])
    if lesson_obj is None:
        return redirect(url_for("dashboard"))
    progress = get_step_progress_for_day(user.id, lesson_obj.day)
    if len(progress) < len(lesson_obj.steps):
        flash("Finish all steps first.", "error")
        return redirect(url_for("lesson"))

    status = complete_today(user.id)
    if status == "completed":
        flash(f"Day {lesson_obj.day} complete. Take the checkpoint to unlock the next day.", "success")
    elif status == "finished":
        flash(f"You finished all {TOTAL_DAYS} days.", "success")
    return redirect(url_for("dashboard"))


@app.route("/review/<int:day>")
@login_required
def review(day):
    user = current_user()
    if day not in get_completed_days(user.id):
        flash("You can only review days you have completed.", "error")
        return redirect(url_for("dashboard"))
    lesson_obj = get_lesson_for_day(day)
    if lesson_obj is None or not lesson_obj.steps:
        return redirect(url_for("dashboard"))

    steps = lesson_obj.steps
    step_index = min(max(request.args.get("step", 1, type=int), 1), len(steps))
    step = steps[step_index - 1]
    progress = get_step_progress_for_day(user.id, day)
    return render_template(
        "review.html",
        lesson=lesson_obj,
        step=step,
        step_index=step_index,
        total_steps=len(steps),
        step_progress=progress.get(step.id),
        visual=parse_visual(step.visual_json),
    )


# ── Skill checks ──────────────────────────────────────────────────────────────

@app.route("/skill-check/<check_id>", methods=["GET", "POST"])
@login_required
def skill_check(check_id):
    user = current_user()
    check = get_skill_check_by_id(check_id)
    if check is None:
        flash("Skill check not found.", "error")
        return redirect(url_for("dashboard"))
    day_number = get_dashboard_data(user.id)["day_number"]
    if check.day_number > day_number:
        flash("Skill check locked for a future day.", "error")
        return redirect(url_for("dashboard"))

    if request.method == "POST":
        choice_index = form_int("choice_index")
        result = record_skill_check_answer(user.id, check.id, -1 if choice_index is None else choice_index)
        if not result["ok"]:
            flash("Pick one of the answers.", "error")
            return redirect(url_for("skill_check", check_id=check.id))
        if result["xp_awarded"]:
            flash(f"+{result['xp_awarded']} XP", "success")
        return redirect(url_for("skill_check", check_id=check.id, result="correct" if result["correct"] else "wrong"))

    result = request.args.get("result")
    return render_template(
        "skill_check.html",
        check=check,
        result=result if result in ("correct", "wrong") else None,
        completed=check.day_number < day_number or get_skill_check_completion(user.id, check.id),
    )


# ── Patterns ──────────────────────────────────────────────────────────────────

@app.route("/patterns/<pattern_id>")
@login_required
def pattern(pattern_id):
    user = current_user()
    pattern_obj = get_pattern_by_id(pattern_id)
    if pattern_obj is None:
        flash("Pattern missing for today.", "error")
        return redirect(url_for("dashboard"))
    day_number = get_dashboard_data(user.id)["day_number"]
    if pattern_obj.day_number > day_number:
        flash("Pattern locked for a future day.", "error")
        return redirect(url_for("dashboard"))

    content = pattern_content(pattern_obj)
    sections = [
        {**section, "visual": parse_visual(section.get("visual"))}
        for section in content["sections"]
    ]
    return render_template(
        "pattern.html",
        pattern=pattern_obj,
        content=content,
        sections=sections,
        completed=pattern_obj.day_number < day_number or is_pattern_completed(user.id, pattern_obj.id),
        done=request.args.get("done") == "1",
    )


@app.route("/patterns/<pattern_id>/finish", methods=["POST"])
@login_required
def pattern_finish(pattern_id):
    user = current_user()
    pattern_obj = get_pattern_by_id(pattern_id)
    if pattern_obj is None or pattern_obj.day_number > get_dashboard_data(user.id)["day_number"]:
        return redirect(url_for("dashboard"))
    mark_pattern_completed(user.id, pattern_obj.id)
    return redirect(url_for("pattern", pattern_id=pattern_obj.id, done=1))


# ── Checkpoints ───────────────────────────────────────────────────────────────

def _checkpoint_gate(user, day):
    """Return a redirect when the user may not open this day's checkpoint, else None."""
    data = get_dashboard_data(user.id)
    if day > data["day_number"]:
        flash("Checkpoint locked until you reach this day.", "error")
        return redirect(url_for("dashboard"))
    if not is_lesson_ready_for_checkpoint(user.id, day):
        flash("Finish the lesson first.", "error")
        return redirect(url_for("lesson"))
    return None


def _load_checkpoint(user, day):
    """Return (test, None) or (None, redirect_response)."""
    blocked = _checkpoint_gate(user, day)
    if blocked is not None:
        return None, blocked
    test = get_checkpoint_test_for_day(day)
    if test is None:
        flash("Checkpoint missing for this day.", "error")
        return None, redirect(url_for("dashboard"))
    return test, None


@app.route("/checkpoint/<int:day>")
@login_required
def checkpoint(day):
    user = current_user()
    test, blocked = _load_checkpoint(user, day)
    if blocked is not None:
        return blocked

    progress = get_checkpoint_progress(user.id, test.id)
    questions = test.questions
    show_id = request.args.get("show")

    question = None
    if show_id and show_id in progress:
        question = next((q for q in questions if q.id == show_id), None)
    if question is None:
        question = next((q for q in questions if q.id not in progress), None)

    return render_template(
        "checkpoint.html",
        day=day,
        test=test,
        question=question,
        question_index=questions.index(question) + 1 if question else len(questions),
        total_questions=len(questions),
        answer=progress.get(question.id) if question else None,
        all_answered=len(progress) >= len(questions),
        latest_attempt=get_latest_checkpoint_attempt(user.id, test.id),
        passed_already=has_passed_checkpoint(user.id, test.id),
        show_result=request.args.get("result") == "done",
    )


@app.route("/checkpoint/<int:day>/answer", methods=["POST"])
@login_required
def checkpoint_answer(day):
    user = current_user()
    test, blocked = _load_checkpoint(user, day)
    if blocked is not None:
        return blocked
    question_id = request.form.get("question_id", "")
    question = next((q for q in test.questions if q.id == question_id), None)
    if question is None:
        return redirect(url_for("checkpoint", day=day))
    choice_index = form_int("choice_index")
    if choice_index is None or not record_checkpoint_answer(user.id, question, choice_index)["ok"]:
        flash("Pick one of the answers.", "error")
        return redirect(url_for("checkpoint", day=day))
    return redirect(url_for("checkpoint", day=day, show=question.id))


@app.route("/checkpoint/<int:day>/continue", methods=["POST"])
@login_required
def checkpoint_continue(day):
    return redirect(url_for("checkpoint", day=day))


@app.route("/checkpoint/<int:day>/finalize", methods=["POST"])
@login_required
def checkpoint_finalize(day):
    user = current_user()
    test, blocked = _load_checkpoint(user, day)
    if blocked is not None:
        return blocked
    if len(get_checkpoint_progress(user.id, test.id)) < len(test.questions):
        flash("Finish all questions first.", "error")
        return redirect(url_for("checkpoint", day=day))
    result = finalize_checkpoint_attempt(user.id, test)
    if result["xp_awarded"]:
        flash(f"+{result['xp_awarded']} XP", "success")
    return redirect(url_for("checkpoint", day=day, result="done"))


@app.route("/checkpoint/<int:day>/reset", methods=["POST"])
@login_required
def checkpoint_reset(day):
    user = current_user()
    test, blocked = _load_checkpoint(user, day)
    if blocked is not None:
        return blocked
    reset_checkpoint_answers(user.id, test.id)
    return redirect(url_for("checkpoint", day=day))


# ── Examples ──────────────────────────────────────────────────────────────────

@app.route("/examples/<example_id>")
@login_required
def example(example_id):
    card = next((c for c in EXAMPLE_CARDS if c["id"] == example_id), None)
    if card is None:
        return redirect(url_for("dashboard"))
    return render_template("example.html", example=card)


with app.app_context():
    db.create_all()

if __name__ == "__main__":
    app.run(debug=True)
