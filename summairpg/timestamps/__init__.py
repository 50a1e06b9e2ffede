"""Timestamped word, line and prompt models."""
