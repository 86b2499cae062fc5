"""
User Management API - CRUD over a single users table
"""

__version__ = "1.0.0"
