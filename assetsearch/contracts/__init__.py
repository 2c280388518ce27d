"""Data contracts and settings."""
