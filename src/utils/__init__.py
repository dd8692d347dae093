"""Shared helpers: logging, errors, configuration, caching."""
