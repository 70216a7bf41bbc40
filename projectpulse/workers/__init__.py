"""Standalone processes of the notification pipeline."""
