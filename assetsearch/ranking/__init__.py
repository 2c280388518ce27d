"""Field scoring and fuzzy matching."""
