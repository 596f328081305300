from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from schemas.email_verification import OkResponse, SendEmailCodeRequest, VerifyEmailCodeRequest
from services.email_verification_service import VerificationCodeStore, get_email_verification_store
from utils.logger_factory import new_logger

router = APIRouter()


@router.post("/auth/email/send", response_model=OkResponse)
def send_email_code(
    payload: SendEmailCodeRequest,
    store: VerificationCodeStore = Depends(get_email_verification_store),
):
    """
    Send a verification code to the given address.

    Always answers ``{"ok": true}``: a blank address or a request inside the
    resend cooldown is skipped without telling the caller.
    """
    log = new_logger("send_email_code")
    try:
        store.request_code(payload.memberEmail)
    except Exception:
        log.exception("Failed to send verification email")
        raise HTTPException(status_code=500, detail="Failed to send verification email.")
    return {"ok": True}


@router.post("/auth/email/verify", response_model=OkResponse)
def verify_email_code(
    payload: VerifyEmailCodeRequest,
    store: VerificationCodeStore = Depends(get_email_verification_store),
):
    if store.verify_code(payload.memberEmail, payload.code):
        return {"ok": True}
    return JSONResponse(status_code=400, content={"ok": False})
