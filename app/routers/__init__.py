"""
API Routers Package

Router Structure:
- books.py: /api/v1/books/* endpoints

Each router is built and registered in main.py.
"""

from app.routers.books import create_books_router

__all__ = [
    "create_books_router",
]
