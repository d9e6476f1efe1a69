"""Shared utilities for the authservice package.

Small, reusable helpers that keep use cases and controllers focused on
business logic.
"""

__all__ = [
    "rand",
]
