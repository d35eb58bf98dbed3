"""Shared utilities (I/O, merging)."""
