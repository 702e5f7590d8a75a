"""Logging setup and the failed-row error log."""
