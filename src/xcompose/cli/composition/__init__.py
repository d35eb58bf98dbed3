"""Composition commands: convert, validation-mode."""
