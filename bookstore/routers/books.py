"""
Books Router

The three book endpoints:

- GET  /books         list every book, one line each
- GET  /books/show    one book by ?isbn=
- POST /books/create  insert a book from form fields

Responses are plain text, not JSON. Each handler is a plain `def`, so
FastAPI runs it in its worker thread pool: one thread per request, all
sharing the Database connection pool.

Wrong HTTP verbs never reach these functions. The router only registers
the listed method, and the framework answers anything else with 405
before dependencies are resolved, so no database work happens.

Backend errors are not caught here (except the duplicate-key case in
create). They propagate to the exception handlers registered in
bookstore.main, which log them and answer 500.
"""

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, status
from fastapi.responses import PlainTextResponse
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from bookstore.dependencies import DatabaseDep
from bookstore.models import Book
from bookstore.models.book import CENTS

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    default_response_class=PlainTextResponse,
)

BOOK_COLUMNS = (Book.isbn, Book.title, Book.author, Book.price)

PRICE_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
# Largest value NUMERIC(10, 2) holds
MAX_PRICE = Decimal("99999999.99")


# =============================================================================
# Helper Functions
# =============================================================================
def parse_price(raw: str) -> Decimal:
    """
    Parse decimal price text, rounded half-up to whole cents.

    Only plain decimal notation is accepted: an optional sign, digits with
    an optional fraction, and an optional exponent. Decimal() alone would
    also take underscores ("5_90"), surrounding whitespace and non-ASCII
    digits.

    Raises:
        HTTPException: 400 if the text is not a finite number, or does not
            fit the price column
    """
    if PRICE_PATTERN.fullmatch(raw) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        price = Decimal(raw).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)

    if abs(price) > MAX_PRICE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)

    return price


# =============================================================================
# Endpoints
# =============================================================================
@router.get(
    "",
    summary="List books",
    description="Every book in the table, one `isbn, title, author, £price` line each.",
)
def list_books(db: DatabaseDep) -> str:
    """
    List every book.

    The whole result set is read into memory before anything is written,
    so a failure halfway through produces a 500 instead of a truncated body.
    An empty table gives an empty body.
    """
    rows = db.query(select(*BOOK_COLUMNS))
    books = [Book.from_row(row) for row in rows]

    return "".join(book.as_line() for book in books)


@router.get(
    "/show",
    summary="Show a book",
    description="One book looked up by exact ISBN.",
    responses={400: {"description": "Missing isbn"}, 404: {"description": "Book not found"}},
)
def show_book(db: DatabaseDep, isbn: str = "") -> str:
    """
    Show one book.

    Raises:
        HTTPException: 400 if isbn is empty, 404 if no book matches
    """
    if isbn == "":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)

    row = db.query_row(select(*BOOK_COLUMNS).where(Book.isbn == isbn))
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    return Book.from_row(row).as_line()


@router.post(
    "/create",
    summary="Create a book",
    description="Insert one book from form fields isbn, title, author and price.",
    responses={
        400: {"description": "Missing field or unparseable price"},
        409: {"description": "A book with this ISBN already exists"},
    },
)
def create_book(
    db: DatabaseDep,
    isbn: Annotated[str, Form()] = "",
    title: Annotated[str, Form()] = "",
    author: Annotated[str, Form()] = "",
    price: Annotated[str, Form()] = "",
) -> str:
    """
    Create a book.

    All input is validated before the insert is attempted.

    Example:
        curl -X POST -d "isbn=978-1470184841&title=Metamorphosis&author=Franz Kafka&price=5.90" \\
            localhost:3000/books/create

    Raises:
        HTTPException: 400 for missing fields or a bad price,
            409 if the ISBN already exists
    """
    if isbn == "" or title == "" or author == "":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)

    book_price = parse_price(price)

    try:
        rows_affected = db.execute(
            insert(Book).values(isbn=isbn, title=title, author=author, price=book_price)
        )
    except IntegrityError as exc:
        logger.warning(f"Rejected duplicate book {isbn}: {exc.orig}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT)

    logger.info(f"Created book {isbn} ({rows_affected} row affected)")
    return f"Book {isbn} created successfully ({rows_affected} row affected)\n"
