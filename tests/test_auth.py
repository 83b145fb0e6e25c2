from datetime import timedelta

from auth import (
    create_session, create_user, delete_session, get_session_user, get_user_by_email,
    normalize_email, verify_user,
)
from models import db, AuthSession, _utcnow


def test_normalize_email():
    assert normalize_email("  Ana@Example.COM ") == "ana@example.com"
    assert normalize_email(None) == ""


def test_create_user_hashes_password(ctx):
    user = create_user(" Ana@Example.com", "hunter22")
    assert user.email == "ana@example.com"
    assert user.password_hash != "hunter22"
    assert get_user_by_email("ANA@example.com").id == user.id


def test_verify_user(ctx):
    user = create_user("ana@example.com", "hunter22")
    assert verify_user("ana@example.com", "hunter22").id == user.id
    assert verify_user("ana@example.com", "wrong") is None
    assert verify_user("nobody@example.com", "hunter22") is None


def test_session_round_trip(ctx, user_id):
    auth_session = create_session(user_id)
    assert len(auth_session.id) == 64
    assert auth_session.expires_at > _utcnow() + timedelta(days=6)
    assert get_session_user(auth_session.id).id == user_id


def test_expired_session_is_deleted(ctx, user_id):
    token = create_session(user_id).id
    db.session.get(AuthSession, token).expires_at = _utcnow() - timedelta(minutes=1)
    db.session.commit()

    assert get_session_user(token) is None
    assert db.session.get(AuthSession, token) is None


def test_unknown_or_missing_token(ctx):
    assert get_session_user(None) is None
    assert get_session_user("not-a-token") is None


def test_delete_session(ctx, user_id):
    token = create_session(user_id).id
    delete_session(token)
    assert get_session_user(token) is None
