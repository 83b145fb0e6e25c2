import logging
import secrets
from datetime import timedelta

from flask import current_app

from models import db, User, AuthSession, _utcnow

log = logging.getLogger(__name__)

SESSION_KEY = "session_token"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(email: str):
    return User.query.filter_by(email=normalize_email(email)).first()


def create_user(email: str, password: str) -> User:
    user = User(email=normalize_email(email))
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    log.info("Registered user %s", user.email)
    return user


def verify_user(email: str, password: str):
    """Return the User when the credentials match, otherwise None."""
    user = get_user_by_email(email)
    if user is None or not user.check_password(password):
        return None
    return user


def session_ttl() -> timedelta:
    return timedelta(days=current_app.config["SESSION_TTL_DAYS"])


def create_session(user_id: int) -> AuthSession:
    auth_session = AuthSession(
        id=secrets.token_hex(32),
        user_id=user_id,
        expires_at=_utcnow() + session_ttl(),
    )
    db.session.add(auth_session)
    db.session.commit()
    return auth_session


def get_session_user(token):
    """Return the User behind a live session token.

    An expired session row is deleted on sight.
    """
    if not token:
        return None
    auth_session = db.session.get(AuthSession, token)
    if auth_session is None:
        return None
    if auth_session.expires_at <= _utcnow():
        db.session.delete(auth_session)
        db.session.commit()
        return None
    return auth_session.user


def delete_session(token):
    if not token:
        return
    AuthSession.query.filter_by(id=token).delete()
    db.session.commit()
