"""Saved email notifications authored by admins."""
