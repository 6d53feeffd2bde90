"""
FastAPI REST API for the Library Catalog.

This module provides a REST API for:
- Book catalog browsing
- Book creation, update and deletion for signed-in users
- User signup and login with JWT bearer tokens
"""
