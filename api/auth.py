from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from schemas.member import (
    DeleteAccountRequest,
    ExistsResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MemberResponse,
    SessionResponse,
    SignupRequest,
    UpdatePasswordRequest,
)
from services import member_service
from services.member_service import DuplicateMemberError, MemberConflictError, MemberError
from utils.logger_factory import new_logger
from utils.session_auth import clear_session, get_session_member, issue_session, require_login

router = APIRouter()


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "message": message})


@router.post("/auth/join", response_model=MemberResponse)
def join(payload: SignupRequest, db: Session = Depends(get_db)):
    log = new_logger("join")
    log.info(f"Signup requested for member id {payload.memberId.strip()}")
    try:
        member = member_service.join(db, payload)
    except DuplicateMemberError as e:
        return _fail(status.HTTP_409_CONFLICT, str(e))
    except MemberError as e:
        return _fail(status.HTTP_400_BAD_REQUEST, str(e))
    return member.to_dict()


@router.post("/auth/login", response_model=MemberResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    try:
        member = member_service.authenticate(db, payload.memberId, payload.memberPwd)
    except MemberError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect credentials")

    issue_session(response, member.member_id, member.member_no)
    member_service.update_last_login(db, member.member_id)
    new_logger("login").info(f"Member logged in: {member.member_id}")
    return member.to_dict()


@router.post("/auth/logout")
def logout(response: Response):
    clear_session(response)
    return {"ok": True}


@router.get("/auth/me", response_model=SessionResponse)
def me(session=Depends(get_session_member)):
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return {"memberId": session["member_id"], "memberNo": session["member_no"]}


@router.get("/auth/check-id", response_model=ExistsResponse)
def check_id(memberId: Optional[str] = Query(default=None), db: Session = Depends(get_db)):
    return ExistsResponse.of(member_service.check_id(db, memberId))


@router.get("/auth/check-email", response_model=ExistsResponse)
def check_email(memberEmail: Optional[str] = Query(default=None), db: Session = Depends(get_db)):
    return ExistsResponse.of(member_service.check_email(db, memberEmail))


@router.post("/auth/forgotPassword")
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    log = new_logger("forgot_password")
    try:
        member_service.forgot_password(db, payload.memberId, payload.memberEmail)
    except MemberError as e:
        return _fail(status.HTTP_400_BAD_REQUEST, str(e))
    except Exception:
        log.exception("Failed to issue temporary password")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")
    return {"ok": True}


@router.post("/auth/updatePassword")
def update_password(
    payload: UpdatePasswordRequest,
    db: Session = Depends(get_db),
    session=Depends(require_login),
):
    if payload.newPwd is None or payload.newPwd != payload.confirmPwd:
        return _fail(status.HTTP_400_BAD_REQUEST, "The new passwords do not match.")

    log = new_logger("update_password")
    try:
        member_service.update_password(db, session["member_id"], payload.currentPwd, payload.newPwd)
    except MemberError as e:
        return _fail(status.HTTP_400_BAD_REQUEST, str(e))
    except MemberConflictError as e:
        return _fail(status.HTTP_409_CONFLICT, str(e))
    except Exception:
        log.exception("Failed to update password")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")
    return {"ok": True}


@router.post("/auth/deleteAccount", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    payload: DeleteAccountRequest,
    db: Session = Depends(get_db),
    session=Depends(require_login),
):
    log = new_logger("delete_account")
    try:
        member_service.delete_account(db, session["member_id"], payload.password)
    except MemberError as e:
        return _fail(status.HTTP_400_BAD_REQUEST, str(e))
    except MemberConflictError as e:
        return _fail(status.HTTP_409_CONFLICT, str(e))
    except Exception:
        log.exception("Failed to delete account")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session(response)
    return response
