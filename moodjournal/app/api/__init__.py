"""HTTP API versions."""
