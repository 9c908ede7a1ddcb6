"""Shell output rendering."""
