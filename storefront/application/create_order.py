import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Mapping, Optional
from pydantic import BaseModel

from storefront.domain.models import (
    Order, OrderLineItem, OrderStatus, ShippingAddress, ShippingMethod
)
from storefront.domain.exceptions import (
    OrderValidationError, ProductNotFoundError, InsufficientStockError, StockUpdateConflictError
)
from storefront.domain.pricing import (
    DEFAULT_SHIPPING_PRICES, calculate_items_price, calculate_shipping_price
)
from storefront.application.interfaces import UnitOfWork
from storefront.application.order_numbers import OrderNumberSequencer


logger = logging.getLogger(__name__)


class OrderItemDTO(BaseModel):
    product_id: str
    quantity: int


class CreateOrderDTO(BaseModel):
    user_id: str
    items: list[OrderItemDTO]
    shipping_address: Optional[ShippingAddress] = None
    shipping_method: Optional[str] = None
    contact_phone: Optional[str] = None


class CreateOrderUseCase:
    """Создание заказа со списанием остатков в одной транзакции.

    Либо списываются остатки по всем позициям и сохраняется заказ,
    либо не меняется ничего.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        sequencer: OrderNumberSequencer,
        shipping_prices: Mapping[ShippingMethod, Decimal] = DEFAULT_SHIPPING_PRICES
    ):
        self._uow = unit_of_work
        self._sequencer = sequencer
        self._shipping_prices = shipping_prices

    async def __call__(self, order_data: CreateOrderDTO) -> Order:
        self._validate(order_data)
        logger.info(f"Создание заказа для пользователя {order_data.user_id}, позиций: {len(order_data.items)}")

        async with self._uow() as uow:
            # 1. Номер заказа
            order_number = await self._sequencer.next_order_number(uow.orders)

            # 2. Проверка и списание остатков, по одной позиции в порядке корзины
            line_items = []
            for item in order_data.items:
                stock = await uow.stock.get(item.product_id)
                if stock is None:
                    raise ProductNotFoundError(item.product_id)
                if stock.count_in_stock < item.quantity:
                    raise InsufficientStockError(item.product_id, stock.count_in_stock, item.quantity)

                updated = await uow.stock.decrement(item.product_id, item.quantity)
                if updated != 1:
                    raise StockUpdateConflictError(item.product_id)

                line_items.append(
                    OrderLineItem(product_id=item.product_id, quantity=item.quantity, unit_price=stock.price)
                )

            # 3-5. Расчет суммы
            items_price = calculate_items_price(line_items)
            shipping_price = calculate_shipping_price(order_data.shipping_method, self._shipping_prices)
            total_price = items_price + shipping_price

            # 6. Создание заказа
            now = datetime.now(timezone.utc)
            order = Order(
                id=str(uuid.uuid4()),
                order_number=order_number,
                user_id=order_data.user_id,
                items=line_items,
                shipping_address=order_data.shipping_address,
                shipping_method=ShippingMethod(order_data.shipping_method),
                contact_phone=order_data.contact_phone,
                items_price=items_price,
                shipping_price=shipping_price,
                total_price=total_price,
                status=OrderStatus.PENDING,
                is_paid=False,
                paid_at=None,
                created_at=now,
                updated_at=now
            )
            await uow.orders.create(order)
            await uow.commit()

        logger.info(f"Заказ создан: {order.id}, номер {order.order_number}, сумма {order.total_price}")
        return order

    def _validate(self, order_data: CreateOrderDTO) -> None:
        if not order_data.user_id:
            raise OrderValidationError("Не указан пользователь")
        if not order_data.items:
            raise OrderValidationError("Список товаров не может быть пустым")
        for item in order_data.items:
            if item.quantity <= 0:
                raise OrderValidationError(f"Некорректное количество товара {item.product_id}: {item.quantity}")
        if order_data.shipping_address is None:
            raise OrderValidationError("Не указан адрес доставки")
        if not order_data.shipping_method:
            raise OrderValidationError("Не указан способ доставки")
