"""Personal mood journal with stats and search."""
