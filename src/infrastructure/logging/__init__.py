"""Logging helpers package."""
