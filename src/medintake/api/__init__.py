"""HTTP API for medintake."""
