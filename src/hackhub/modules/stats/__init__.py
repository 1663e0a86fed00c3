"""Admin dashboard statistics."""
