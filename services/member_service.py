"""
Member accounts: signup, credential checks, password recovery and removal.

Writes that depend on the current password hash (password change, account
deletion) are guarded by matching the old hash in the UPDATE itself, so a
concurrent change makes the second writer fail instead of silently winning.
"""
import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from models.member import Member, MemberAuth
from schemas.member import SignupRequest
from services.email_verification_service import normalize_email
from services.mail_service import send_mail
from utils.db_retry import db_retry
from utils.logger_factory import new_logger
from utils.password_hasher import get_password_hash, verify_password

log = new_logger("member_service")

DEFAULT_ROLE = "ROLE_USER"
TEMP_PASSWORD_LENGTH = 12
# No 0/O, 1/l/I, to keep emailed passwords readable
TEMP_PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789!@#$%^&*?"
TEMP_PASSWORD_SUBJECT = "[Gold Simulator] Temporary password"
TEMP_PASSWORD_BODY = "Temporary password: {password}\nPlease sign in and change your password right away."


class MemberError(ValueError):
    """Bad input or a credential mismatch; the message is safe to show."""


class DuplicateMemberError(MemberError):
    pass


class MemberConflictError(RuntimeError):
    """A guarded update matched no row because the record changed underneath us."""


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_temp_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    return ''.join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


def _find_active(db: Session, member_id: str) -> Optional[Member]:
    return db.query(Member).filter(
        Member.member_id == member_id,
        Member.member_is_active == True,  # noqa: E712
    ).first()


@db_retry
def join(db: Session, req: SignupRequest, role: str = DEFAULT_ROLE) -> Member:
    member_id = _clean(req.memberId)
    member_name = _clean(req.memberName)
    member_email = normalize_email(req.memberEmail)
    if not member_id or not member_name or not member_email or not req.memberPwd:
        raise MemberError("All fields are required.")

    if db.query(Member).filter_by(member_id=member_id).count() > 0:
        raise DuplicateMemberError("DUPLICATE_ID")
    if db.query(Member).filter_by(member_email=member_email).count() > 0:
        raise DuplicateMemberError("DUPLICATE_EMAIL")

    member = Member(
        member_id=member_id,
        member_pwd=get_password_hash(req.memberPwd),
        member_name=member_name,
        member_email=member_email,
        member_role=role or DEFAULT_ROLE,
        member_is_active=True,
    )
    member.auths.append(MemberAuth(auth=member.member_role))

    try:
        db.add(member)
        db.commit()
        db.refresh(member)
    except OperationalError:
        db.rollback()
        log.exception("OperationalError in join, will retry.")
        raise
    except IntegrityError:
        # Lost a race with a concurrent signup for the same id or email
        db.rollback()
        log.info(f"Signup raced on unique key for {member_id}")
        raise DuplicateMemberError("DUPLICATE_ID")
    log.info(f"Member joined: {member.member_id} (no={member.member_no})")
    return member


@db_retry
def authenticate(db: Session, member_id: Optional[str], password: Optional[str]) -> Member:
    member = _find_active(db, _clean(member_id))
    if member is None or not verify_password(password, member.member_pwd):
        log.info(f"Login failed for {_clean(member_id)}")
        raise MemberError("Incorrect credentials")
    return member


@db_retry
def update_last_login(db: Session, member_id: str) -> None:
    try:
        db.query(Member).filter(Member.member_id == member_id).update(
            {Member.member_last_login: _now()}, synchronize_session=False
        )
        db.commit()
    except OperationalError:
        db.rollback()
        raise


@db_retry
def check_id(db: Session, member_id: Optional[str]) -> bool:
    """True when the id is taken. A blank id is reported as taken."""
    member_id = _clean(member_id)
    if not member_id:
        return True
    return db.query(Member).filter_by(member_id=member_id).count() > 0


@db_retry
def check_email(db: Session, member_email: Optional[str]) -> bool:
    """True when the email is taken. A blank email is reported as taken."""
    member_email = normalize_email(member_email)
    if not member_email:
        return True
    return db.query(Member).filter_by(member_email=member_email).count() > 0


@db_retry
def _stage_temp_password(db: Session, member_id: str, member_email: str, temp_password: str) -> int:
    try:
        return db.query(Member).filter(
            Member.member_id == member_id,
            Member.member_email == member_email,
            Member.member_is_active == True,  # noqa: E712
        ).update({Member.member_pwd: get_password_hash(temp_password)}, synchronize_session=False)
    except OperationalError:
        db.rollback()
        log.exception("OperationalError in forgot_password, will retry.")
        raise


def forgot_password(db: Session, member_id: Optional[str], member_email: Optional[str]) -> None:
    """
    Replace the password of the matching member with a mailed temporary one.

    Only the staged update is retried, so a retry never mails twice. The new
    hash is committed once the mail has gone out; a mail failure rolls the
    change back and propagates.
    """
    member_id = _clean(member_id)
    member_email = normalize_email(member_email)
    if not member_id or not member_email:
        raise MemberError("Member id or email does not match.")

    temp_password = generate_temp_password()
    if _stage_temp_password(db, member_id, member_email, temp_password) == 0:
        db.rollback()
        raise MemberError("Member id or email does not match.")

    try:
        send_mail(member_email, TEMP_PASSWORD_SUBJECT, TEMP_PASSWORD_BODY.format(password=temp_password))
    except Exception:
        db.rollback()
        raise
    db.commit()
    log.info(f"Temporary password issued for {member_id}")


@db_retry
def update_password(db: Session, member_id: str, current_pwd: Optional[str], new_pwd: Optional[str]) -> None:
    member_id = _clean(member_id)
    if not member_id or not current_pwd or not new_pwd or not current_pwd.strip() or not new_pwd.strip():
        raise MemberError("Please check your input.")

    try:
        member = _find_active(db, member_id)
        old_hash = member.member_pwd if member else None
        if not old_hash or not verify_password(current_pwd, old_hash):
            raise MemberError("Current password does not match.")
        if verify_password(new_pwd, old_hash):
            raise MemberError("The new password must differ from the current one.")

        rows = db.query(Member).filter(
            Member.member_id == member_id,
            Member.member_pwd == old_hash,
        ).update(
            {Member.member_pwd: get_password_hash(new_pwd), Member.member_updated_at: _now()},
            synchronize_session=False,
        )
        if rows == 0:
            db.rollback()
            raise MemberConflictError("The password was just changed. Please try again.")
        db.commit()
    except OperationalError:
        db.rollback()
        log.exception("OperationalError in update_password, will retry.")
        raise
    log.info(f"Password updated for {member_id}")


@db_retry
def delete_account(db: Session, member_id: str, password: Optional[str]) -> None:
    """Soft-delete: the row stays (ids and emails remain reserved) but can no longer sign in."""
    member_id = _clean(member_id)
    if not member_id or not password or not password.strip():
        raise MemberError("Password does not match.")

    try:
        member = _find_active(db, member_id)
        stored_hash = member.member_pwd if member else None
        if not stored_hash or not verify_password(password, stored_hash):
            raise MemberError("Password does not match.")

        rows = db.query(Member).filter(
            Member.member_id == member_id,
            Member.member_pwd == stored_hash,
            Member.member_is_active == True,  # noqa: E712
        ).update(
            {Member.member_is_active: False, Member.member_deleted_at: _now()},
            synchronize_session=False,
        )
        if rows == 0:
            db.rollback()
            raise MemberConflictError("Nothing to delete.")
        db.commit()
    except OperationalError:
        db.rollback()
        log.exception("OperationalError in delete_account, will retry.")
        raise
    log.info(f"Member deactivated: {member_id}")
