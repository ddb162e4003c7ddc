"""Encode execution: planning, argument building and process sessions."""
