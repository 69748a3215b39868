"""
Base repository with generic CRUD operations.
"""
from contextlib import asynccontextmanager
from typing import TypeVar, Generic, Type, Optional, List, Any, Dict, Iterable

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from editorial_ledger.core.exceptions import StoreError

ModelType = TypeVar("ModelType", bound=SQLModel)


@asynccontextmanager
async def store_operation(session: AsyncSession, operation: str):
    """
    Turn database failures inside the block into StoreError("Failed to <operation>: ...").
    The session is rolled back so it can still be used afterwards.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StoreError(operation, getattr(exc, "orig", None) or exc) from exc


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with CRUD operations.
    Inherit and specify the model class. Every write commits on its own.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def create_many(self, objs_in: Iterable[Dict[str, Any]]) -> List[ModelType]:
        """Insert several records in one commit."""
        db_objs = [self.model(**obj_in) for obj_in in objs_in]
        self.session.add_all(db_objs)
        await self.session.commit()
        for db_obj in db_objs:
            await self.session.refresh(db_obj)
        return db_objs

    async def get(self, key: Any) -> Optional[ModelType]:
        """Get a record by primary key."""
        return await self.session.get(self.model, key)

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        order_desc: bool = True,
        limit: Optional[int] = None
    ) -> List[ModelType]:
        """List records with optional equality filters, ordering and limit."""
        query = select(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)

        if order_by and hasattr(self.model, order_by):
            order_column = getattr(self.model, order_by)
            query = query.order_by(order_column.desc() if order_desc else order_column)

        if limit:
            query = query.limit(limit)

        result = await self.session.exec(query)
        return list(result.all())

    async def update(self, key: Any, obj_in: Dict[str, Any]) -> Optional[ModelType]:
        """Update a record; None values are left untouched."""
        db_obj = await self.get(key)
        if not db_obj:
            return None

        for field, value in obj_in.items():
            if hasattr(db_obj, field) and value is not None:
                setattr(db_obj, field, value)

        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def delete(self, key: Any) -> bool:
        """Delete a record."""
        db_obj = await self.get(key)
        if not db_obj:
            return False

        await self.session.delete(db_obj)
        await self.session.commit()
        return True

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count records."""
        query = select(func.count()).select_from(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)

        result = await self.session.exec(query)
        return result.one()
