"""Presentation layer - HTTP boundary."""
