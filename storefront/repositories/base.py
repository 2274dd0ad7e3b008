import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from storefront.core.exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Общий контракт коллекции записей: list / create / update / delete.

    Фильтры только на точное совпадение полей, сортировка по одной колонке.
    Подклассы задают model и добавляют поиск по бизнес-кодам.
    """

    model = None

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def collection(self) -> str:
        return self.model.__tablename__

    def _conditions(self, where: Optional[Dict[str, Any]]) -> list:
        return [getattr(self.model, field) == value for field, value in (where or {}).items()]

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Ошибка записи в коллекцию {self.collection}: {e}")
            raise

    async def list(
        self,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Any]:
        query = select(self.model).where(*self._conditions(where))
        if order_by:
            column = getattr(self.model, order_by)
            # равные значения упорядочиваются по id в том же направлении
            tie = self.model.id
            query = query.order_by(
                *((column.desc(), tie.desc()) if descending else (column.asc(), tie.asc()))
            )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, **where: Any) -> int:
        query = (
            select(func.count())
            .select_from(self.model)
            .where(*self._conditions(where))
        )
        result = await self.session.execute(query)
        return result.scalar_one()

    async def get_by_id(self, row_id: int) -> Optional[Any]:
        result = await self.session.execute(
            select(self.model).where(self.model.id == row_id)
        )
        return result.scalar_one_or_none()

    async def create(self, **fields: Any) -> Any:
        record = self.model(**fields)
        self.session.add(record)
        await self._commit()
        await self.session.refresh(record)
        return record

    async def update(self, row_id: int, **fields: Any) -> Any:
        record = await self.get_by_id(row_id)
        if record is None:
            raise RecordNotFoundError(self.collection, row_id)
        for field, value in fields.items():
            setattr(record, field, value)
        self.session.add(record)
        await self._commit()
        await self.session.refresh(record)
        return record

    async def toggle(self, row_id: int, field: str) -> Any:
        """Инвертировать булево поле одной записи"""
        record = await self.get_by_id(row_id)
        if record is None:
            raise RecordNotFoundError(self.collection, row_id)
        return await self.update(row_id, **{field: not getattr(record, field)})

    async def delete(self, row_id: int) -> None:
        record = await self.get_by_id(row_id)
        if record is None:
            raise RecordNotFoundError(self.collection, row_id)
        await self.session.delete(record)
        await self._commit()
