"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends

from chiccloset.core.database import InMemoryDatabase, get_db


# Type alias for database dependency
Database = Annotated[InMemoryDatabase, Depends(get_db)]
