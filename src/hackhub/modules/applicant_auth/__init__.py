"""Applicant OTP login and session management."""
