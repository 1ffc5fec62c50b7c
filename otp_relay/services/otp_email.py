from __future__ import annotations
from html import escape
from typing import Any, Dict

from ..config import Settings
from ..domain.schemas.otp import OtpRequest


def render_otp_html(name: str, otp: str, expiry_minutes: int = 5) -> str:
    """
    Build the verification email body.

    Both ``name`` and ``otp`` come straight from the caller, so they are
    HTML-escaped before they touch the markup. The code is rendered exactly once.
    """
    safe_name = escape(name, quote=True)
    safe_otp = escape(otp, quote=True)

    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <div style="background: linear-gradient(135deg, #ffffff 0%, #747474 50%, #4a90e2 100%); padding: 30px; text-align: center; border-radius: 12px 12px 0 0;">
            <h1 style="margin: 0; color: #2c3e50;">🏢 Houston 100</h1>
            <p style="margin: 10px 0 0 0; color: #4a5568;">Investment Group LLC</p>
        </div>

        <div style="background: white; padding: 30px; border: 1px solid #e1e8ed;">
            <h2>Verification Code for Expense Tracker</h2>
            <p>Hello {safe_name},</p>
            <p>You requested access to the Houston 100 Expense Tracker. Please use the verification code below:</p>

            <div style="background: #f8f9fa; border: 2px solid #4a90e2; border-radius: 8px; padding: 20px; text-align: center; margin: 20px 0;">
                <div style="font-size: 2rem; font-weight: bold; color: #4a90e2; letter-spacing: 8px;">{safe_otp}</div>
                <p style="margin: 10px 0 0 0; font-size: 0.9rem; color: #666;">This code expires in {int(expiry_minutes)} minutes</p>
            </div>

            <p><strong>Important:</strong> This code is for Houston 100 members only. If you didn't request this code, please ignore this email.</p>

            <div style="background: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; border-radius: 6px; margin: 20px 0;">
                <strong>🔒 Security Notice:</strong> Never share this code with anyone. Houston 100 staff will never ask for your verification code.
            </div>

            <p>Best regards,<br>
            <strong>Houston 100 Security Team</strong><br>
            Houston 100 Group LLC</p>
        </div>

        <div style="background: #f8f9fa; padding: 20px; text-align: center; border-radius: 0 0 12px 12px; font-size: 0.9rem; color: #666;">
            <p>Houston 100 Investment Group LLC<br>
            Kingdom-focused Financial Stewardship</p>
        </div>
    </div>
    """


def build_send_payload(req: OtpRequest, settings: Settings) -> Dict[str, Any]:
    """Resend /emails body for a single recipient."""
    return {
        "from": settings.OTP_EMAIL_FROM,
        "to": [req.email],
        "subject": settings.OTP_EMAIL_SUBJECT,
        "html": render_otp_html(req.name, req.otp, settings.OTP_EXPIRY_MINUTES),
    }
