"""
API Routers Package

Router Structure:
- books.py: /books, /books/show, /books/create

Each router is imported and registered in main.py.
"""

from bookstore.routers.books import router as books_router

__all__ = ["books_router"]
