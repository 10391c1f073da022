"""cleanops application package."""
