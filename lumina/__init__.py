"""Lumina inventory service.

In-memory product catalog with dashboard aggregates, a filterable
inventory view with batch actions and CSV export, and Gemini-backed
advisory operations.
"""

__version__ = "0.1.0"
