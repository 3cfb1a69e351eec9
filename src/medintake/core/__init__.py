"""Settings and startup checks."""
