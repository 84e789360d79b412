"""
Core app - Shared abstractions and utilities.

This app provides:
- The domain exception hierarchy and its HTTP mapping (exceptions)
- Project-wide management commands (seed)
"""
