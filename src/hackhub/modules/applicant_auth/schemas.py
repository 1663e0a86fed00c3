"""Applicant login schemas."""

from pydantic import BaseModel, Field

from hackhub.modules.applicant_auth.models import OtpPurpose
from hackhub.modules.applicants.schemas import ApplicantResponse


class SendOtpRequest(BaseModel):
    identifier: str = Field(..., min_length=3, max_length=255, description="Email or mobile")
    purpose: OtpPurpose = OtpPurpose.LOGIN


class SendOtpResponse(BaseModel):
    success: bool = True
    message: str
    expires_in_minutes: int


class VerifyOtpRequest(BaseModel):
    identifier: str = Field(..., min_length=3, max_length=255)
    otp: str = Field(..., pattern=r"^\d{4,8}$")
    purpose: OtpPurpose = OtpPurpose.LOGIN


class VerifyOtpResponse(BaseModel):
    success: bool = True
    message: str
    session_token: str
    applicant: ApplicantResponse


class VerifyOtpFailure(BaseModel):
    success: bool = False
    error: str
    message: str


class LogoutResponse(BaseModel):
    message: str
