"""Stage submissions and jury review."""
