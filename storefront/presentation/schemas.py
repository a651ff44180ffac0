from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from storefront.domain.models import OrderStatus, ShippingMethod


class OrderItemRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)


class ShippingAddressRequest(BaseModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str = Field(min_length=4, max_length=10)
    country: str = Field(min_length=1)


class CreateOrderRequest(BaseModel):
    user_id: str = Field(min_length=1)
    items: list[OrderItemRequest] = Field(min_length=1)
    shipping_address: ShippingAddressRequest
    shipping_method: ShippingMethod
    contact_phone: Optional[str] = None


class OrderItemResponse(BaseModel):
    product_id: str
    quantity: int
    unit_price: Decimal


class ShippingAddressResponse(BaseModel):
    address: str
    city: str
    postal_code: str
    country: str


class OrderResponse(BaseModel):
    id: str
    order_number: int
    user_id: str
    items: list[OrderItemResponse]
    shipping_address: ShippingAddressResponse
    shipping_method: ShippingMethod
    contact_phone: Optional[str] = None
    items_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    status: OrderStatus
    is_paid: bool
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, order):
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            items=[
                OrderItemResponse(product_id=item.product_id, quantity=item.quantity, unit_price=item.unit_price)
                for item in order.items
            ],
            shipping_address=ShippingAddressResponse(**order.shipping_address.model_dump()),
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


class ErrorDetail(BaseModel):
    error: str
    message: str
    product_id: Optional[str] = None
    available: Optional[int] = None
    requested: Optional[int] = None


class ErrorResponse(BaseModel):
    detail: ErrorDetail
