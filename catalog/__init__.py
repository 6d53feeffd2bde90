"""
Storage package for the library catalog.

This package contains:
- Document models for users and books
- The async MongoDB manager
"""

__version__ = "1.0.0"
