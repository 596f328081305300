from pydantic import AliasChoices, BaseModel, Field
from typing import Optional

# The signup page posts ``email``; older clients post ``memberEmail``.
_EMAIL_ALIASES = AliasChoices("memberEmail", "email")


class SendEmailCodeRequest(BaseModel):
    memberEmail: Optional[str] = Field(default=None, validation_alias=_EMAIL_ALIASES)


class VerifyEmailCodeRequest(BaseModel):
    memberEmail: Optional[str] = Field(default=None, validation_alias=_EMAIL_ALIASES)
    code: Optional[str] = None


class OkResponse(BaseModel):
    ok: bool
