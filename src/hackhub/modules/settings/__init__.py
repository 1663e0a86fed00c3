"""Event-wide settings and outgoing email configuration."""
