"""Shared helpers: constants, environment loading and logging setup."""
