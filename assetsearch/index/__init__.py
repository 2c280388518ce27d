"""Inverted index storage and text normalization."""
