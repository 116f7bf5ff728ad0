"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.

The Database object is created once in the application lifespan and
stored on app.state. Handlers never reach for a module-level global;
they declare a `db: DatabaseDep` parameter and FastAPI supplies it.

Tests replace the data source with:
    app.dependency_overrides[get_database] = lambda: fake_db
"""

from typing import Annotated

from fastapi import Depends, Request

from bookstore.database import Database


def get_database(request: Request) -> Database:
    """Return the Database opened at startup."""
    return request.app.state.database


DatabaseDep = Annotated[Database, Depends(get_database)]
