"""Feature flag commands: list."""
