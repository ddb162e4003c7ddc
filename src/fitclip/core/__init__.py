"""Core utilities shared across fitclip."""
