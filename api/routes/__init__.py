"""
Route modules for the catalog API.
"""
