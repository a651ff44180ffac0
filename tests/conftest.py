"""Pytest fixtures: in-memory unit of work and order-creation helpers."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal

import pytest

from storefront.application.create_order import CreateOrderDTO, CreateOrderUseCase, OrderItemDTO
from storefront.application.order_numbers import OrderNumberSequencer
from storefront.domain.exceptions import StorageUnavailableError, TransactionAbortedError
from storefront.domain.models import ShippingAddress, StockRecord


class InMemoryStore:
    """Committed state shared by all units of work."""

    def __init__(self):
        self.products = {}
        self.orders = []
        self.conflicting_products = set()
        self.orders_unavailable = False
        self.fail_commit = False

    def add_product(self, product_id, count_in_stock, price="10.00", units_sold=0):
        self.products[product_id] = StockRecord(
            id=product_id,
            name=f"Product {product_id}",
            price=Decimal(price),
            count_in_stock=count_in_stock,
            units_sold=units_sold,
        )


class InMemoryStockRepository:
    def __init__(self, store, undo_log):
        self._store = store
        self._undo_log = undo_log

    async def get(self, product_id):
        await asyncio.sleep(0)
        record = self._store.products.get(product_id)
        return record.model_copy() if record else None

    async def decrement(self, product_id, quantity):
        await asyncio.sleep(0)
        if product_id in self._store.conflicting_products:
            return 0
        record = self._store.products.get(product_id)
        if record is None or record.count_in_stock < quantity:
            return 0
        record.count_in_stock -= quantity
        record.units_sold += quantity
        self._undo_log.append((product_id, quantity))
        return 1


class InMemoryOrderRepository:
    def __init__(self, store, pending):
        self._store = store
        self._pending = pending

    async def get_most_recent(self):
        await asyncio.sleep(0)
        if self._store.orders_unavailable:
            raise StorageUnavailableError("orders storage is down")
        return max(self._store.orders, key=lambda order: order.order_number, default=None)

    async def create(self, order):
        self._pending.append(order)
        return order


class _InMemoryUnitOfWorkImpl:
    def __init__(self, store):
        self._store = store
        self._undo_log = []
        self._pending = []
        self.stock = InMemoryStockRepository(store, self._undo_log)
        self.orders = InMemoryOrderRepository(store, self._pending)

    async def commit(self):
        if self._store.fail_commit:
            raise TransactionAbortedError("commit failed")
        self._store.orders.extend(self._pending)
        self._pending.clear()
        self._undo_log.clear()

    async def rollback(self):
        for product_id, quantity in reversed(self._undo_log):
            record = self._store.products[product_id]
            record.count_in_stock += quantity
            record.units_sold -= quantity
        self._undo_log.clear()
        self._pending.clear()


class InMemoryUnitOfWork:
    """Decrements are applied immediately and undone on rollback."""

    def __init__(self, store):
        self._store = store

    @asynccontextmanager
    async def __call__(self):
        uow = _InMemoryUnitOfWorkImpl(self._store)
        try:
            yield uow
            await uow.rollback()
        except Exception:
            await uow.rollback()
            raise


FIXED_NOW = datetime(2025, 4, 17, 10, 30)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def unit_of_work(store):
    return InMemoryUnitOfWork(store)


@pytest.fixture
def sequencer():
    return OrderNumberSequencer(clock=lambda: FIXED_NOW)


@pytest.fixture
def use_case(unit_of_work, sequencer):
    return CreateOrderUseCase(unit_of_work, sequencer)


@pytest.fixture
def shipping_address():
    return ShippingAddress(address="1 Main St", city="Springfield", postal_code="12345", country="US")


@pytest.fixture
def make_dto(shipping_address):
    """Factory: make_dto([("a", 2), ("b", 1)], shipping_method="express")."""

    def _make(items, shipping_method="standard", user_id="user-1", contact_phone=None):
        return CreateOrderDTO(
            user_id=user_id,
            items=[OrderItemDTO(product_id=product_id, quantity=quantity) for product_id, quantity in items],
            shipping_address=shipping_address,
            shipping_method=shipping_method,
            contact_phone=contact_phone,
        )

    return _make
