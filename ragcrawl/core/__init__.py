"""Core configuration, errors, logging and shared definitions."""
