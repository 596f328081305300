"""
In-memory store of pending email verification codes.

One entry per normalized email address. An entry is created when a code is
sent, flipped to ``verified`` once the code is confirmed, and dropped by the
periodic cleanup after it expires. Nothing is persisted: a restart simply
invalidates every outstanding code.

Concurrency: request handlers run in a thread pool and the cleanup timer runs
in its own worker thread. Each email maps onto one of a fixed set of lock
stripes, so "check cooldown, write entry" and "read entry, compare, mark
verified" are atomic per email while unrelated emails rarely contend.
"""
import secrets
import string
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from passlib.context import CryptContext
from pydantic import BaseModel

from services.mail_service import send_mail
from utils.logger_factory import new_logger
from utils.password_hasher import pwd_context

log = new_logger("email_verification")

CODE_EXPIRY_MINUTES = 3
RESEND_COOLDOWN_SECONDS = 10
CODE_LENGTH = 6
LOCK_STRIPES = 64

MAIL_SUBJECT = "[Gold Simulator] Email verification code"
MAIL_BODY_TEMPLATE = "Verification code: {code} (enter within {minutes} minutes)"


class VerificationEntry(BaseModel):
    code_hash: str
    expires_at: datetime
    last_sent_at: datetime
    verified: bool = False

    class Config:
        frozen = True


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def generate_code(length: int = CODE_LENGTH) -> str:
    """Zero-padded numeric code, each digit drawn independently from ``secrets``."""
    return ''.join(secrets.choice(string.digits) for _ in range(length))


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class VerificationCodeStore:
    def __init__(
        self,
        mail_sender: Callable[[str, str, str], object] = send_mail,
        hasher: CryptContext = pwd_context,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._entries: Dict[str, VerificationEntry] = {}
        self._locks = [threading.Lock() for _ in range(LOCK_STRIPES)]
        self._mail_sender = mail_sender
        self._hasher = hasher
        self._clock = clock

    def _lock_for(self, email: str) -> threading.Lock:
        return self._locks[hash(email) % LOCK_STRIPES]

    def __len__(self) -> int:
        return len(self._entries)

    def has_entry(self, email: str) -> bool:
        return normalize_email(email) in self._entries

    def request_code(self, email_raw: Optional[str]) -> None:
        """
        Issue a fresh code for ``email_raw`` and mail it.

        Silently does nothing for a blank address or while the previous send is
        still inside the resend cooldown. Mail failures propagate; the stored
        entry stays valid so the user can retry after the cooldown.
        """
        email = normalize_email(email_raw)
        if not email:
            log.info("Blank email on code request; nothing to do")
            return

        with self._lock_for(email):
            now = self._clock()
            current = self._entries.get(email)
            if current is not None and now < current.last_sent_at + timedelta(seconds=RESEND_COOLDOWN_SECONDS):
                log.info(f"Resend cooldown active for {email}; skipping")
                return

            code = generate_code()
            self._entries[email] = VerificationEntry(
                code_hash=self._hasher.hash(code),
                expires_at=now + timedelta(minutes=CODE_EXPIRY_MINUTES),
                last_sent_at=now,
                verified=False,
            )

        self._mail_sender(
            email,
            MAIL_SUBJECT,
            MAIL_BODY_TEMPLATE.format(code=code, minutes=CODE_EXPIRY_MINUTES),
        )
        log.info(f"Verification code sent to {email}")

    def verify_code(self, email_raw: Optional[str], code: Optional[str]) -> bool:
        """
        Consume the code for ``email_raw``.

        Every failure (unknown email, expired, already verified, wrong code)
        returns False without saying which.
        """
        email = normalize_email(email_raw)
        if not email or code is None or not code.strip():
            return False

        with self._lock_for(email):
            entry = self._entries.get(email)
            if entry is None or entry.verified or self._clock() >= entry.expires_at:
                log.info(f"No usable verification entry for {email}")
                return False

            try:
                matched = self._hasher.verify(code, entry.code_hash)
            except ValueError:
                # NUL bytes or oversized input; bcrypt refuses to hash these
                matched = False
            if not matched:
                log.info(f"Verification code mismatch for {email}")
                return False

            self._entries[email] = entry.model_copy(update={"verified": True})

        log.info(f"Email verified: {email}")
        return True

    def cleanup(self) -> None:
        """Evict every entry whose expiry has passed, verified or not."""
        now = self._clock()
        removed = 0
        for email, entry in self._entries.copy().items():
            if not entry.expires_at < now:
                continue
            with self._lock_for(email):
                # Re-read under the lock: a send may have replaced the entry.
                current = self._entries.get(email)
                if current is not None and current.expires_at < now:
                    del self._entries[email]
                    removed += 1
        if removed:
            log.info(f"Removed {removed} expired verification entries")


email_verification_store = VerificationCodeStore()


def get_email_verification_store() -> VerificationCodeStore:
    return email_verification_store
