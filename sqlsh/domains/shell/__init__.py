"""Interactive shell domain."""
