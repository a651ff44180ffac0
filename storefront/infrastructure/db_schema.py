from sqlalchemy import (
    Table, Column, String, Integer, BigInteger, Numeric, Boolean, Enum, DateTime, JSON, MetaData,
    ForeignKey, CheckConstraint
)
from sqlalchemy.sql import func

from storefront.domain.models import OrderStatus, ShippingMethod

metadata = MetaData()


products_tbl = Table(
    "products",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("price", Numeric(10, 2), nullable=False),
    Column("count_in_stock", Integer, nullable=False, default=0),
    Column("units_sold", Integer, nullable=False, default=0),
    CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    CheckConstraint("count_in_stock >= 0", name="ck_products_count_in_stock_non_negative"),
    CheckConstraint("units_sold >= 0", name="ck_products_units_sold_non_negative")
)


orders_tbl = Table(
    "orders",
    metadata,
    Column("id", String, primary_key=True),
    Column("order_number", BigInteger, nullable=False, unique=True, index=True),
    Column("user_id", String, nullable=False, index=True),
    Column("shipping_address", JSON, nullable=False),
    Column("shipping_method", Enum(ShippingMethod), nullable=False),
    Column("contact_phone", String, nullable=True),
    Column("items_price", Numeric(12, 2), nullable=False),
    Column("shipping_price", Numeric(12, 2), nullable=False),
    Column("total_price", Numeric(12, 2), nullable=False),
    Column("status", Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING),
    Column("is_paid", Boolean, nullable=False, default=False),
    Column("paid_at", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
)


order_items_tbl = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("position", Integer, nullable=False),
    Column("product_id", String, ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(10, 2), nullable=False)
)
