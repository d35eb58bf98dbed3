"""Core engine: API types, composers, migration, configuration."""
