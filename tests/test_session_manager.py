# tests/test_session_manager.py
import pytest

from household_budget.errors import AuthError, AuthErrorKind, RemoteError, ValidationError
from household_budget.services.session_manager import SessionManager

EMAIL = "ana@test.com"
PASSWORD = "pw123456"


class DownRemote:
    """Every call fails like an unreachable backend."""

    def __getattr__(self, name):
        def call(*args, **kwargs):
            raise RemoteError("connection refused")

        return call


def test_sign_up_does_not_sign_in_or_create_settings(sessions, remote):
    seen = []
    sessions.subscribe(seen.append)

    identity = sessions.sign_up(EMAIL, PASSWORD, "Ana")
    assert identity.email == EMAIL
    assert identity.display_name == "Ana"
    assert not sessions.is_authenticated
    assert seen == []

    auth = remote.authenticate(EMAIL, PASSWORD)
    assert remote.fetch_settings(auth.token) is None


def test_duplicate_email_is_rejected(sessions):
    sessions.sign_up(EMAIL, PASSWORD)
    with pytest.raises(AuthError) as exc:
        sessions.sign_up(" ANA@test.com ", "other-pass")
    assert exc.value.kind is AuthErrorKind.email_taken


def test_wrong_password(sessions):
    sessions.sign_up(EMAIL, PASSWORD)
    with pytest.raises(AuthError) as exc:
        sessions.sign_in(EMAIL, "nope")
    assert exc.value.kind is AuthErrorKind.invalid_credentials
    assert sessions.identity is None


def test_missing_fields_fail_before_any_call(sessions):
    with pytest.raises(ValidationError):
        sessions.sign_in("", PASSWORD)
    with pytest.raises(ValidationError):
        sessions.sign_up(EMAIL, "   ")


def test_sign_in_and_out_notify_listeners(sessions):
    seen = []
    sessions.subscribe(seen.append)
    sessions.sign_up(EMAIL, PASSWORD)

    identity = sessions.sign_in(EMAIL, PASSWORD)
    assert sessions.is_authenticated
    assert sessions.identity == identity

    sessions.sign_out()
    assert seen == [identity, None]
    assert sessions.identity is None and sessions.token is None

    sessions.unsubscribe(seen.append)
    sessions.sign_in(EMAIL, PASSWORD)
    assert len(seen) == 2


def test_sign_out_revokes_the_token(sessions, remote):
    sessions.sign_up(EMAIL, PASSWORD)
    sessions.sign_in(EMAIL, PASSWORD)
    token = sessions.token
    sessions.sign_out()
    with pytest.raises(AuthError) as exc:
        remote.fetch_settings(token)
    assert exc.value.kind is AuthErrorKind.not_authenticated


def test_sign_out_tolerates_an_already_revoked_token(sessions, remote):
    sessions.sign_up(EMAIL, PASSWORD)
    sessions.sign_in(EMAIL, PASSWORD)
    remote.end_session(sessions.token)
    sessions.sign_out()
    assert not sessions.is_authenticated


def test_update_email_requires_a_session(sessions):
    with pytest.raises(AuthError) as exc:
        sessions.update_email("new@test.com")
    assert exc.value.kind is AuthErrorKind.not_authenticated


def test_update_email_and_password(sessions):
    seen = []
    sessions.sign_up(EMAIL, PASSWORD)
    sessions.sign_in(EMAIL, PASSWORD)
    sessions.subscribe(seen.append)

    identity = sessions.update_email("Ana.New@test.com")
    assert identity.email == "ana.new@test.com"
    assert seen == [identity]

    sessions.update_password("fresh-pass")
    sessions.sign_out()
    with pytest.raises(AuthError):
        sessions.sign_in("ana.new@test.com", PASSWORD)
    assert sessions.sign_in("ana.new@test.com", "fresh-pass").email == "ana.new@test.com"


def test_update_email_to_a_taken_address(sessions):
    sessions.sign_up("bo@test.com", PASSWORD)
    sessions.sign_up(EMAIL, PASSWORD)
    sessions.sign_in(EMAIL, PASSWORD)
    with pytest.raises(AuthError) as exc:
        sessions.update_email("bo@test.com")
    assert exc.value.kind is AuthErrorKind.email_taken
    assert sessions.identity.email == EMAIL


def test_password_reset_mails_known_addresses_only(sessions, outbox):
    sessions.sign_up(EMAIL, PASSWORD)
    sessions.request_password_reset(EMAIL)
    sessions.request_password_reset("ghost@test.com")
    assert [email for email, _ in outbox] == [EMAIL]
    assert outbox[0][1]  # a signed token


def test_backend_failures_become_unknown_auth_errors():
    sessions = SessionManager(DownRemote())
    with pytest.raises(AuthError) as exc:
        sessions.sign_in(EMAIL, PASSWORD)
    assert exc.value.kind is AuthErrorKind.unknown
