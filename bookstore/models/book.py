"""
Book Model

The only model of the service, mapped to the `books` table.

Columns:
- isbn: primary key, supplied by the client
- title, author: required text
- price: NUMERIC(10, 2), handled as Decimal

WHY Decimal and not float?
==========================
Binary floats cannot represent most cent values exactly (5.90 becomes
5.900000095... in single precision). Numeric(10, 2) stores exact cents and
SQLAlchemy hands them back as decimal.Decimal.
"""

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.engine import Row
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base

CENTS = Decimal("0.01")


class Book(Base):
    """
    Book record.

    Table: books

    Example:
        book = Book(
            isbn="978-1470184841",
            title="Metamorphosis",
            author="Franz Kafka",
            price=Decimal("5.90"),
        )
        book.as_line()  # '978-1470184841, Metamorphosis, Franz Kafka, £5.90\\n'
    """

    __tablename__ = "books"

    isbn: Mapped[str] = mapped_column(
        String(20),
        primary_key=True,
        comment="International Standard Book Number"
    )
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Book title"
    )
    author: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Author name"
    )
    # Numeric(10, 2) = up to 10 digits, 2 after decimal point
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Book price in GBP"
    )

    @classmethod
    def from_row(cls, row: Row) -> "Book":
        """Build a Book from a result row holding the four book columns."""
        return cls(
            isbn=row.isbn,
            title=row.title,
            author=row.author,
            price=Decimal(str(row.price)),
        )

    def as_line(self) -> str:
        """Plain-text representation used by the list and show endpoints."""
        price = Decimal(self.price).quantize(CENTS, rounding=ROUND_HALF_UP)
        return f"{self.isbn}, {self.title}, {self.author}, £{price}\n"

    def __repr__(self) -> str:
        return f"Book(isbn='{self.isbn}', title='{self.title}')"
