"""Storage and navigation services."""
