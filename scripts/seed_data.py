#!/usr/bin/env python3
"""
Database Seed Script

Populates the books table with sample data for development.

USAGE:
    # DATABASE_URL must point at a development database
    python scripts/seed_data.py

This script:
1. Connects to the database using the application settings
2. Creates the books table if it does not exist
3. Inserts sample books, skipping ISBNs that are already present
"""

import sys
from decimal import Decimal
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import insert, select

from bookstore.config import get_settings
from bookstore.database import Database, create_tables
from bookstore.models import Book

SAMPLE_BOOKS = [
    {"isbn": "978-1470184841", "title": "Metamorphosis", "author": "Franz Kafka", "price": Decimal("5.90")},
    {"isbn": "978-1503261969", "title": "Emma", "author": "Jane Austen", "price": Decimal("7.99")},
    {"isbn": "978-1505255607", "title": "The Time Machine", "author": "H. G. Wells", "price": Decimal("5.99")},
    {"isbn": "978-0451524935", "title": "1984", "author": "George Orwell", "price": Decimal("12.99")},
]


def seed(database: Database) -> int:
    """Insert every sample book that is not there yet; return how many were added."""
    added = 0
    for book in SAMPLE_BOOKS:
        existing = database.query_row(select(Book.isbn).where(Book.isbn == book["isbn"]))
        if existing is not None:
            print(f"  skip {book['isbn']} (already present)")
            continue
        added += database.execute(insert(Book).values(**book))
        print(f"  added {book['isbn']} {book['title']}")
    return added


def main() -> None:
    settings = get_settings()
    print(f"Seeding {settings.safe_database_url}...")

    database = Database.connect(settings.database_url)
    try:
        create_tables(database.engine)
        added = seed(database)
    finally:
        database.dispose()

    print(f"Done. {added} book(s) added.")


if __name__ == "__main__":
    main()
