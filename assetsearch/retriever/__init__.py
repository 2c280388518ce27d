"""Query engine."""
