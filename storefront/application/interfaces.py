from abc import ABC, abstractmethod
from typing import Optional
from storefront.domain.models import Order, StockRecord


class StockRepository(ABC):
    @abstractmethod
    async def get(self, product_id: str) -> Optional[StockRecord]:
        pass

    @abstractmethod
    async def decrement(self, product_id: str, quantity: int) -> int:
        """Списывает quantity со склада и увеличивает units_sold.
        Возвращает количество обновленных записей (0 — конфликт)."""
        pass


class OrderRepository(ABC):
    @abstractmethod
    async def get_most_recent(self) -> Optional[Order]:
        pass

    @abstractmethod
    async def create(self, order: Order) -> Order:
        pass


class UnitOfWork(ABC):
    @property
    @abstractmethod
    def stock(self) -> StockRepository:
        pass

    @property
    @abstractmethod
    def orders(self) -> OrderRepository:
        pass

    @abstractmethod
    async def __call__(self):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
