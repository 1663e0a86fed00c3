"""Applicant identity store, registration and admin management."""
