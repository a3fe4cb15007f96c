"""Command-line interface for ragcrawl."""
