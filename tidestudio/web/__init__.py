"""Backend service for tide-studio."""
