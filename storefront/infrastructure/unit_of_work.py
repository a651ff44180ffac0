import logging
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.domain.exceptions import TransactionAbortedError
from storefront.infrastructure.repositories import (
    SQLAlchemyStockRepository,
    SQLAlchemyOrderRepository
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def __call__(self):
        async with self._session_factory() as session:
            try:
                # Создаем реализацию с репозиториями
                uow_impl = _UnitOfWorkImpl(session)
                yield uow_impl  # Отдаем внутреннюю реализацию
                # Если commit не вызван — rollback
                await session.rollback()
            except Exception:
                await session.rollback()
                raise


class _UnitOfWorkImpl:
    def __init__(self, session: AsyncSession):
        self._session = session
        self.stock = SQLAlchemyStockRepository(session)
        self.orders = SQLAlchemyOrderRepository(session)

    async def commit(self):
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Транзакция не зафиксирована: {e}")
            raise TransactionAbortedError(f"Транзакция прервана: {str(e)}") from e

    async def rollback(self):
        await self._session.rollback()
