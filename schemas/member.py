from pydantic import BaseModel
from typing import Optional


class SignupRequest(BaseModel):
    memberId: str
    memberPwd: str
    memberName: str
    memberEmail: str


class LoginRequest(BaseModel):
    memberId: str
    memberPwd: str


class MemberResponse(BaseModel):
    memberNo: int
    memberId: str
    memberName: str
    memberEmail: str
    memberRole: str


class SessionResponse(BaseModel):
    memberId: str
    memberNo: int


class ExistsResponse(BaseModel):
    exists: int  # 1 when taken (or blank), 0 when free

    @classmethod
    def of(cls, taken: bool) -> "ExistsResponse":
        return cls(exists=1 if taken else 0)


class ForgotPasswordRequest(BaseModel):
    memberId: Optional[str] = None
    memberEmail: Optional[str] = None


class UpdatePasswordRequest(BaseModel):
    currentPwd: Optional[str] = None
    newPwd: Optional[str] = None
    confirmPwd: Optional[str] = None


class DeleteAccountRequest(BaseModel):
    password: Optional[str] = None
