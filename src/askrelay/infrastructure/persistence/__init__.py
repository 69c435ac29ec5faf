"""File-backed configuration and diagnostic storage."""
