"""Composite resource commands: check-fallback."""
