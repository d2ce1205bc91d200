"""Lumina test suite."""
