import smtplib
from email.mime.text import MIMEText
import os
from utils.logger_factory import new_logger

log = new_logger("mail_service")


def send_mail(to_email: str, subject: str, body: str):
    """
    Send a single-recipient plaintext message over SMTP with STARTTLS.

    Failures (missing credentials, connection or auth errors) are raised to the
    caller; this function never swallows them.
    """
    username = os.environ.get("EMAIL_SERVER_USER")
    password = os.environ.get("EMAIL_SERVER_PASS")
    smtp_server = os.environ.get("EMAIL_SERVER_HOST", "smtp.gmail.com")
    smtp_port = int(os.environ.get("EMAIL_SERVER_PORT", 587))
    from_email = os.environ.get("EMAIL_FROM_ADDRESS") or username

    if not username or not password:
        raise RuntimeError("EMAIL_SERVER_USER and EMAIL_SERVER_PASS must be set to send mail.")

    msg = MIMEText(body, "plain", "utf-8")
    msg["Subject"] = subject
    msg["From"] = from_email
    msg["To"] = to_email

    with smtplib.SMTP(smtp_server, smtp_port, timeout=20) as server:
        server.starttls()
        server.login(username, password)
        server.sendmail(from_email, [to_email], msg.as_string())
    log.info(f"Mail sent to {to_email} [{subject}]")
