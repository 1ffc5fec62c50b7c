from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class OtpRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str
    otp: str = Field(min_length=1)
    name: str = Field(min_length=1)


class ProviderResponse(BaseModel):
    # Resend returns more than the id; keep whatever it sends
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None


class SendOtpOut(BaseModel):
    success: bool = True
    message: str = "OTP sent successfully"
    id: Optional[str] = None
