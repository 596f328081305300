import pytest
from sqlalchemy.exc import OperationalError
from tenacity import wait_none

from models.member import Member
from schemas.member import SignupRequest
from services import member_service
from utils.password_hasher import verify_password


@pytest.fixture
def member(db):
    return member_service.join(db, SignupRequest(
        memberId="goldbug", memberPwd="Secret123!", memberName="Gold Bug", memberEmail="goldbug@example.com",
    ))


def _fail_first_call(monkeypatch, db, name):
    real = getattr(db, name)
    calls = []

    def flaky(*args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            raise OperationalError("statement", {}, Exception("connection reset"))
        return real(*args, **kwargs)

    monkeypatch.setattr(db, name, flaky)
    return calls


def _stored_hash(db):
    db.expire_all()
    return db.query(Member).filter_by(member_id="goldbug").one().member_pwd


def test_update_password_retries_after_operational_error(db, member, monkeypatch):
    calls = _fail_first_call(monkeypatch, db, "commit")

    member_service.update_password.retry_with(wait=wait_none())(db, "goldbug", "Secret123!", "NewSecret456!")

    assert len(calls) == 2
    assert verify_password("NewSecret456!", _stored_hash(db))


def test_delete_account_retries_after_operational_error(db, member, monkeypatch):
    calls = _fail_first_call(monkeypatch, db, "commit")

    member_service.delete_account.retry_with(wait=wait_none())(db, "goldbug", "Secret123!")

    assert len(calls) == 2
    db.expire_all()
    assert db.query(Member).filter_by(member_id="goldbug").one().member_is_active is False


def test_forgot_password_retry_mails_once(db, member, monkeypatch):
    sent = []
    monkeypatch.setattr(member_service, "send_mail", lambda to, subject, body: sent.append(body))
    monkeypatch.setattr(
        member_service, "_stage_temp_password",
        member_service._stage_temp_password.retry_with(wait=wait_none()),
    )
    calls = _fail_first_call(monkeypatch, db, "query")

    member_service.forgot_password(db, "goldbug", "goldbug@example.com")

    assert len(calls) == 2
    assert len(sent) == 1
    temp_password = sent[0].split("\n")[0].split(": ", 1)[1]
    assert verify_password(temp_password, _stored_hash(db))


def test_update_password_gives_up_after_three_attempts(db, member, monkeypatch):
    attempts = []

    def always_fail():
        attempts.append(1)
        raise OperationalError("statement", {}, Exception("connection reset"))

    monkeypatch.setattr(db, "commit", always_fail)
    with pytest.raises(OperationalError):
        member_service.update_password.retry_with(wait=wait_none())(db, "goldbug", "Secret123!", "NewSecret456!")
    assert len(attempts) == 3
    assert verify_password("Secret123!", _stored_hash(db))
