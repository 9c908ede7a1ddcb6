"""Shared building blocks for sqlsh."""
