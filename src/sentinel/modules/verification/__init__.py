"""Email verification tokens."""
