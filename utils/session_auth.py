from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from jose import JWTError, jwt
import os
from utils.logger_factory import new_logger

SECRET_KEY = os.environ.get("SESSION_SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("SESSION_SECRET_KEY environment variable must be set for session cookies.")

ALGORITHM = os.environ.get("SESSION_ALGORITHM", "HS256")
SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "GOLDSIM_SESSION")
SESSION_MAX_AGE_MINUTES = int(os.environ.get("SESSION_MAX_AGE_MINUTES", 30))
SESSION_COOKIE_SECURE = os.environ.get("SESSION_COOKIE_SECURE", "false").lower() == "true"

session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


def issue_session(response: Response, member_id: str, member_no: int) -> None:
    """Sign the login identity into the session cookie on ``response``."""
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=SESSION_MAX_AGE_MINUTES)
    token = jwt.encode(
        {"sub": member_id, "member_no": member_no, "exp": expires_at},
        SECRET_KEY,
        algorithm=ALGORITHM,
    )
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE_MINUTES * 60,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


def get_session_member(token: str = Depends(session_cookie)):
    """
    Decode the session cookie.

    Returns ``{"member_id", "member_no"}`` or None when the cookie is absent,
    expired or was not signed by us.
    """
    if not token:
        return None
    log = new_logger("get_session_member")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        log.info(f"Rejected session cookie: {str(e)}")
        return None
    member_id = payload.get("sub")
    member_no = payload.get("member_no")
    if member_id is None or member_no is None:
        log.warning("Session cookie is missing member claims")
        return None
    return {"member_id": member_id, "member_no": int(member_no)}


def require_login(session=Depends(get_session_member)):
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return session
