"""Tests for session and view state records."""

import pytest

from predict_app.data.models import User, UserRole
from predict_app.errors import FailureCategory, SessionError
from predict_app.state.models import (
    ADMIN_MODALS,
    AUTH_REQUIRED_MODALS,
    ModalKind,
    OperationResult,
    OperationStatus,
    Session,
)


def _user(user_id: str = "u1") -> User:
    return User(id=user_id, phone="0712345678", balance=1500.0, role=UserRole.USER)


class TestSession:
    """Test session token/user consistency."""

    def test_empty_session(self):
        session = Session()
        assert session.token is None
        assert session.user is None
        assert not session.is_authenticated

    def test_empty_string_token_means_none(self):
        assert Session("").token is None

    def test_hydrate_keeps_user_unknown(self):
        session = Session()
        session.hydrate("abc")

        assert session.token == "abc"
        assert not session.is_authenticated

    def test_validate_attaches_user(self):
        session = Session("abc")
        session.validate(_user())

        assert session.is_authenticated
        assert session.user.id == "u1"

    def test_validate_without_token_fails(self):
        with pytest.raises(SessionError):
            Session().validate(_user())

    def test_hydrate_with_new_token_drops_user(self):
        session = Session()
        session.establish("abc", _user())

        session.hydrate("def")

        assert session.token == "def"
        assert session.user is None

    def test_hydrate_with_same_token_keeps_user(self):
        session = Session()
        session.establish("abc", _user())

        session.hydrate("abc")

        assert session.is_authenticated

    def test_establish_requires_token(self):
        with pytest.raises(SessionError):
            Session().establish("", _user())

    def test_forget_user_keeps_token(self):
        session = Session()
        session.establish("abc", _user())

        session.forget_user()

        assert session.token == "abc"
        assert session.user is None

    def test_clear(self):
        session = Session()
        session.establish("abc", _user())

        session.clear()

        assert session.token is None
        assert session.user is None

    def test_repr_hides_token(self):
        session = Session("super-secret-token")
        assert "super-secret-token" not in repr(session)
        assert "has_token=True" in repr(session)


class TestOperationResult:

    def test_ok_only_for_success(self):
        assert OperationResult(OperationStatus.SUCCESS).ok
        assert not OperationResult(OperationStatus.STALE).ok
        assert not OperationResult(
            OperationStatus.FAILED, message="x", category=FailureCategory.ACTION_ERROR
        ).ok


class TestModalGroups:

    def test_guarded_modals_are_disjoint(self):
        assert not AUTH_REQUIRED_MODALS & ADMIN_MODALS

    def test_entry_dialogs_are_unguarded(self):
        for kind in (ModalKind.LOGIN, ModalKind.REGISTER, ModalKind.MARKET_DETAILS):
            assert kind not in AUTH_REQUIRED_MODALS
            assert kind not in ADMIN_MODALS
