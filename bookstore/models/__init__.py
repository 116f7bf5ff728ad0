"""
SQLAlchemy Models Package

Import all models here to:
1. Make them available as: from bookstore.models import Book
2. Ensure Base.metadata knows every table before create_tables() runs
"""

from bookstore.models.book import Book

__all__ = ["Book"]
