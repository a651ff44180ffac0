import logging
from typing import Optional
from sqlalchemy import select, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.models import (
    Order, OrderLineItem, OrderStatus, ShippingAddress, ShippingMethod, StockRecord
)
from storefront.domain.exceptions import StorageUnavailableError
from storefront.infrastructure.db_schema import products_tbl, orders_tbl, order_items_tbl
from storefront.application.interfaces import StockRepository, OrderRepository

logger = logging.getLogger(__name__)


class SQLAlchemyStockRepository(StockRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, product_id: str) -> Optional[StockRecord]:
        try:
            result = await self._session.execute(
                select(products_tbl).where(products_tbl.c.id == product_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Ошибка чтения остатка товара {product_id}: {e}")
            raise StorageUnavailableError(f"Хранилище товаров недоступно: {str(e)}") from e
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def decrement(self, product_id: str, quantity: int) -> int:
        # Условие в WHERE не даст уйти в минус при гонке с параллельной транзакцией
        stmt = (
            update(products_tbl)
            .where(
                products_tbl.c.id == product_id,
                products_tbl.c.count_in_stock >= quantity
            )
            .values(
                count_in_stock=products_tbl.c.count_in_stock - quantity,
                units_sold=products_tbl.c.units_sold + quantity
            )
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Ошибка списания остатка товара {product_id}: {e}")
            raise StorageUnavailableError(f"Хранилище товаров недоступно: {str(e)}") from e
        return result.rowcount

    def _to_domain(self, row) -> StockRecord:
        return StockRecord(
            id=row.id,
            name=row.name,
            price=row.price,
            count_in_stock=row.count_in_stock,
            units_sold=row.units_sold
        )


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_most_recent(self) -> Optional[Order]:
        # Номер начинается с YYMMDD, поэтому наибольший номер — последний выданный;
        # created_at ставится после списания остатков и может идти не по порядку номеров
        try:
            result = await self._session.execute(
                select(orders_tbl)
                .order_by(orders_tbl.c.order_number.desc())
                .limit(1)
            )
            row = result.fetchone()
            if not row:
                return None
            items = await self._session.execute(
                select(order_items_tbl)
                .where(order_items_tbl.c.order_id == row.id)
                .order_by(order_items_tbl.c.position.asc())
            )
            item_rows = items.fetchall()
        except SQLAlchemyError as e:
            logger.error(f"Ошибка чтения последнего заказа: {e}")
            raise StorageUnavailableError(f"Хранилище заказов недоступно: {str(e)}") from e
        return self._to_domain(row, item_rows)

    async def create(self, order: Order) -> Order:
        order_stmt = insert(orders_tbl).values(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            shipping_address=order.shipping_address.model_dump(),
            shipping_method=order.shipping_method,
            contact_phone=order.contact_phone,
            items_price=order.items_price,
            shipping_price=order.shipping_price,
            total_price=order.total_price,
            status=order.status,
            is_paid=order.is_paid,
            paid_at=order.paid_at,
            created_at=order.created_at,
            updated_at=order.updated_at
        )
        items_stmt = insert(order_items_tbl).values([
            {
                "order_id": order.id,
                "position": position,
                "product_id": item.product_id,
                "quantity": item.quantity,
                "unit_price": item.unit_price
            }
            for position, item in enumerate(order.items)
        ])
        try:
            await self._session.execute(order_stmt)
            await self._session.execute(items_stmt)
        except SQLAlchemyError as e:
            logger.error(f"Ошибка сохранения заказа {order.id}: {e}")
            raise StorageUnavailableError(f"Хранилище заказов недоступно: {str(e)}") from e
        return order

    def _to_domain(self, row, item_rows) -> Order:
        """Трансформация DB → Domain"""
        return Order(
            id=row.id,
            order_number=row.order_number,
            user_id=row.user_id,
            items=[
                OrderLineItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price
                )
                for item in item_rows
            ],
            shipping_address=ShippingAddress(**row.shipping_address),
            shipping_method=ShippingMethod(row.shipping_method),
            contact_phone=row.contact_phone,
            items_price=row.items_price,
            shipping_price=row.shipping_price,
            total_price=row.total_price,
            status=OrderStatus(row.status),
            is_paid=row.is_paid,
            paid_at=row.paid_at,
            created_at=row.created_at,
            updated_at=row.updated_at
        )
