"""Query domain: parsing, completion, execution and history."""
