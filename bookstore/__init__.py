"""
Bookstore Service Package

A small HTTP service for listing, showing and creating book records
stored in a single relational table.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: Pooled data access object (SQLAlchemy engine wrapper)
- main.py: FastAPI application factory and server entry point
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- routers/: HTTP route handlers
"""

__version__ = "0.1.0"
