"""Feature domains for sqlsh."""
