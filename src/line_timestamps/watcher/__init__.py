"""Polling watcher that feeds document changes to the timestamp engine."""
