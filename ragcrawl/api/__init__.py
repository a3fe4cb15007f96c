"""HTTP API for ragcrawl."""
