"""Core infrastructure: configuration, logging, errors, retry and time helpers."""
