"""
Email Service using Resend

Sends OTP codes, registration confirmations, selection notices, admin
broadcasts and saved notifications.
"""

import asyncio
import logging
import os
from html import escape

import resend

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = os.getenv("RESEND_API_KEY")

# Configurations
EMAIL_FROM = os.getenv("EMAIL_FROM", "HackHub <noreply@hackhub.dev>")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

_STYLE = """
        <style>
            body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
            .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
            .header { color: #4c1d95; margin-bottom: 24px; }
            .code { font-size: 32px; font-weight: bold; letter-spacing: 8px; background-color: #f3f4f6; padding: 16px; border-radius: 8px; text-align: center; }
            .info-box { background-color: #f9fafb; border: 1px solid #e5e7eb; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .button { display: inline-block; background-color: #4c1d95; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }
            .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
        </style>
"""


def _wrap(title: str, body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>{_STYLE}</head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>
            {body}
            <div class="footer">
                <p>HackHub - Hackathon Management</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
    cc: list[str] | None = None,
    from_email: str | None = None,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email
        cc: Optional carbon-copy recipients
        from_email: Sender override; defaults to EMAIL_FROM

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": from_email or EMAIL_FROM,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }
        if cc:
            params["cc"] = cc

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_otp_code(
    to_email: str,
    applicant_name: str,
    code: str,
    expiry_minutes: int,
) -> bool:
    """Send a login code to an applicant."""
    safe_name = escape(applicant_name)

    body = f"""
            <p>Hello {safe_name},</p>
            <p>Use the code below to sign in to your HackHub applicant portal:</p>
            <div class="code">{code}</div>
            <p><strong>This code expires in {expiry_minutes} minutes</strong> and can only be used once.</p>
            <p>If you didn't request this code, you can safely ignore this email.</p>
    """
    return await send_email(
        to_email=to_email,
        subject="Your HackHub login code",
        html_content=_wrap("Your Login Code", body),
    )


async def send_registration_confirmation(
    to_email: str,
    applicant_name: str,
    registration_id: str,
) -> bool:
    """Send registration confirmation with the applicant's registration ID."""
    safe_name = escape(applicant_name)
    safe_registration_id = escape(registration_id)

    login_url = f"{FRONTEND_URL}/applicant/login"
    body = f"""
            <p>Hello {safe_name},</p>
            <p>Thank you for registering for the hackathon. Your registration is complete.</p>
            <div class="info-box">
                <p><strong>Registration ID:</strong> {safe_registration_id}</p>
            </div>
            <p>You can sign in to the applicant portal with your email address to follow your progress and submit your work:</p>
            <a href="{login_url}" class="button">Open Applicant Portal</a>
    """
    return await send_email(
        to_email=to_email,
        subject=f"HackHub registration confirmed ({safe_registration_id})",
        html_content=_wrap("Registration Confirmed", body),
    )


async def send_selection_notification(
    to_email: str,
    applicant_name: str,
    registration_id: str,
) -> bool:
    """Tell an applicant they were selected and ask them to confirm participation."""
    safe_name = escape(applicant_name)
    safe_registration_id = escape(registration_id)

    confirm_url = f"{FRONTEND_URL}/confirm-participation?code={safe_registration_id}"
    body = f"""
            <p>Hello {safe_name},</p>
            <p><strong>Congratulations!</strong> You have been selected to participate in the hackathon.</p>
            <p>Please confirm your participation so we can reserve your place:</p>
            <a href="{confirm_url}" class="button">Confirm Participation</a>
            <p>Your registration ID is <strong>{safe_registration_id}</strong>.</p>
    """
    return await send_email(
        to_email=to_email,
        subject="You have been selected for the hackathon",
        html_content=_wrap("You're In!", body),
    )


async def send_participation_confirmed(
    to_email: str,
    applicant_name: str,
) -> bool:
    """Acknowledge a participation confirmation."""
    safe_name = escape(applicant_name)

    body = f"""
            <p>Hello {safe_name},</p>
            <p>Your participation is confirmed. Watch the applicant portal for the next stage.</p>
    """
    return await send_email(
        to_email=to_email,
        subject="Participation confirmed",
        html_content=_wrap("Participation Confirmed", body),
    )


async def send_notification(
    to_email: str,
    applicant_name: str,
    subject: str,
    message: str,
) -> bool:
    """Send an admin-authored message to an applicant."""
    safe_name = escape(applicant_name)
    safe_message = escape(message).replace("\n", "<br>")

    body = f"""
            <p>Hello {safe_name},</p>
            <div class="info-box">{safe_message}</div>
    """
    return await send_email(
        to_email=to_email,
        subject=subject,
        html_content=_wrap(escape(subject), body),
    )


async def send_custom_email(
    to_email: str,
    subject: str,
    message: str,
    cc: list[str] | None = None,
    from_email: str | None = None,
) -> bool:
    """Send a saved admin notification to an arbitrary address."""
    safe_message = escape(message).replace("\n", "<br>")

    return await send_email(
        to_email=to_email,
        subject=subject,
        html_content=_wrap(escape(subject), f'<div class="info-box">{safe_message}</div>'),
        cc=cc,
        from_email=from_email,
    )


async def send_test_email(to_email: str, from_email: str | None = None) -> bool:
    """Confirm the email configuration by sending a short message."""
    body = """
            <p>This is a test message from the HackHub admin settings page.</p>
            <p>If you received it, outgoing email is configured correctly.</p>
    """
    return await send_email(
        to_email=to_email,
        subject="HackHub test email",
        html_content=_wrap("Test Email", body),
        from_email=from_email,
    )
