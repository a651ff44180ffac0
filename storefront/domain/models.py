from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    OVERNIGHT = "overnight"


class ShippingAddress(BaseModel):
    """Value Object — адрес доставки"""
    address: str
    city: str
    postal_code: str
    country: str


class StockRecord(BaseModel):
    """Value Object — складская запись товара"""
    id: str
    name: str
    price: Decimal = Field(ge=0)
    count_in_stock: int = Field(ge=0)
    units_sold: int = Field(default=0, ge=0)


class OrderLineItem(BaseModel):
    """Позиция заказа, цена фиксируется в момент создания"""
    product_id: str
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """Domain Entity — заказ"""
    id: str
    order_number: int
    user_id: str
    items: list[OrderLineItem] = Field(min_length=1)
    shipping_address: ShippingAddress
    shipping_method: ShippingMethod
    contact_phone: Optional[str] = None
    items_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    status: OrderStatus
    is_paid: bool = False
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
