"""
Base repository shared by every dashboard table.
Generic CRUD plus the COUNT / GROUP BY helpers the reports are built from.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, case
from sqlalchemy.sql import ColumnElement
from estate_dashboard.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type, Tuple, Sequence
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)

Conditions = Optional[Sequence[ColumnElement]]


def count_if(condition):
    """Conditional aggregate: number of rows satisfying condition, 0 when none."""
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class BaseRepository(Generic[ModelType]):
    """
    Repository over a single model class bound to one request-scoped session.

    Mutations commit immediately and roll back before re-raising, so the
    session stays usable for the error response.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def _name(self) -> str:
        return self.model.__name__

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Insert a row built from ``obj_in`` and return it refreshed.

        Raises:
            SQLAlchemyError: Propagated after rollback (IntegrityError on
                unique violations, mapped to 409 by the error handlers)
        """
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create {self._name}: {e}")
            raise
        await self.db.refresh(db_obj)
        logger.debug(f"Created {self._name} with id: {db_obj.id}")
        return db_obj

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        obj = result.scalar_one_or_none()
        if obj is None:
            logger.debug(f"{self._name} with id {id} not found")
        return obj

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """First row whose ``field`` equals ``value``, or None."""
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self._name}")

        result = await self.db.execute(select(self.model).where(getattr(self.model, field) == value))
        return result.scalars().first()

    async def get_multi(
        self,
        skip: int = 0,
        limit: int = 100,
        conditions: Conditions = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """
        Rows matching all ``conditions``, ordered and sliced.

        Args:
            skip: Rows to skip (page offset)
            limit: Maximum rows to return
            conditions: SQL expressions combined with AND
            order_by: Column name, prefixed with '-' for descending;
                unknown names fall back to newest first
        """
        query = select(self.model)
        if conditions:
            query = query.where(*conditions)

        query = query.order_by(self._order_clause(order_by)).offset(skip).limit(limit)
        result = await self.db.execute(query)
        objects = list(result.scalars().all())

        logger.debug(f"Retrieved {len(objects)} {self._name} rows")
        return objects

    async def paginate(
        self,
        skip: int = 0,
        limit: int = 20,
        conditions: Conditions = None,
        order_by: Optional[str] = None
    ) -> Tuple[List[ModelType], int]:
        """One page of rows plus the total number of matching rows."""
        total = await self.count(conditions)
        items = await self.get_multi(skip=skip, limit=limit, conditions=conditions, order_by=order_by)
        return items, total

    async def update(self, id: uuid.UUID, obj_in: Dict[str, Any]) -> Optional[ModelType]:
        """
        Apply the non-None values of ``obj_in`` to the row.

        Returns:
            The refreshed row, or None when no row has this id
        """
        db_obj = await self.get_by_id(id)
        if db_obj is None:
            return None

        changes = {k: v for k, v in obj_in.items() if v is not None}
        if not changes:
            logger.warning(f"No valid data provided for updating {self._name} {id}")
            return db_obj

        for field, value in changes.items():
            setattr(db_obj, field, value)

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update {self._name} {id}: {e}")
            raise
        await self.db.refresh(db_obj)
        logger.debug(f"Updated {self._name} {id}: {sorted(changes)}")
        return db_obj

    async def delete(self, id: uuid.UUID) -> bool:
        """Delete by id; False when nothing matched."""
        try:
            result = await self.db.execute(delete(self.model).where(self.model.id == id))
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete {self._name} {id}: {e}")
            raise
        return result.rowcount > 0

    async def count(self, conditions: Conditions = None) -> int:
        query = select(func.count(self.model.id))
        if conditions:
            query = query.where(*conditions)

        result = await self.db.execute(query)
        return result.scalar() or 0

    async def count_by(self, column, conditions: Conditions = None) -> Dict[Any, int]:
        """
        Row counts grouped by ``column``, e.g. a status breakdown.
        Values with no rows are absent from the mapping.
        """
        query = select(column, func.count(self.model.id)).group_by(column)
        if conditions:
            query = query.where(*conditions)

        result = await self.db.execute(query)
        return {value: count for value, count in result.all()}

    async def exists(self, id: uuid.UUID) -> bool:
        return await self.count([self.model.id == id]) > 0

    def _order_clause(self, order_by: Optional[str]):
        if order_by:
            descending = order_by.startswith('-')
            column = getattr(self.model, order_by.lstrip('-'), None)
            if column is not None:
                return column.desc() if descending else column.asc()
        return self.model.created_at.desc()
