"""REST API for swagcheck."""
