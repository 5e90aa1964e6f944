"""Restaurant reservation administration service."""
