"""Logging, errors and filesystem locations."""
