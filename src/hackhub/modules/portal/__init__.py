"""Applicant portal: dashboard, rounds and stage submissions."""
