"""
Base CRUD operations for SQLAlchemy models.

Provides generic read helpers and the dialect-specific INSERT construct
used for atomic ON CONFLICT writes. Model-specific CRUD classes inherit
and extend these.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    def dialect_insert(self, session: AsyncSession) -> Any:
        """
        Build an INSERT for the bound dialect that supports ON CONFLICT clauses.

        Args:
            session: Async database session (used to resolve the dialect)

        Returns:
            Dialect-specific Insert construct for self.model

        Raises:
            NotImplementedError: If the dialect has no ON CONFLICT support here
        """
        dialect = session.get_bind().dialect.name
        try:
            insert = _DIALECT_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(
                f"Atomic upserts are not supported for dialect '{dialect}'"
            ) from None
        return insert(self.model)

    async def get_one_by(self, session: AsyncSession, **filters: Any) -> ModelT | None:
        """
        Retrieve a single record matching equality filters.

        Args:
            session: Async database session
            **filters: Column name / value pairs, combined with AND

        Returns:
            Model instance (refreshed from the row) if found, None otherwise
        """
        stmt = (
            select(self.model)
            .filter_by(**filters)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by(self, session: AsyncSession, **filters: Any) -> int:
        """
        Count records matching equality filters.

        Args:
            session: Async database session
            **filters: Column name / value pairs, combined with AND

        Returns:
            Number of matching rows
        """
        stmt = select(func.count()).select_from(self.model).filter_by(**filters)
        result = await session.execute(stmt)
        return result.scalar_one()
